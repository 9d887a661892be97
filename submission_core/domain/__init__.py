"""Domain model for submissions: status machine, event envelope, exceptions."""

from .events import SubmissionEvent
from .status import Stage, SubmissionStatus, can_transition

__all__ = [
    "SubmissionEvent",
    "SubmissionStatus",
    "Stage",
    "can_transition",
]
