"""
Submission lifecycle: statuses, pipeline stages and the transition graph.
"""

from __future__ import annotations

from enum import Enum


class SubmissionStatus(str, Enum):
    """Authoritative persisted status of a submission."""

    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    STORED = "STORED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class Stage:
    """Symbolic stage names carried on events for observability only."""

    RECEIVED = "RECEIVED"
    VALIDATION = "VALIDATION"
    STORAGE = "STORAGE"
    PROCESSING = "PROCESSING"
    NOTIFICATION = "NOTIFICATION"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


TERMINAL_STATUSES = frozenset(
    {SubmissionStatus.COMPLETED, SubmissionStatus.FAILED, SubmissionStatus.REJECTED}
)

# processed_at is set iff the status is one of these
PROCESSED_STATUSES = frozenset({SubmissionStatus.COMPLETED, SubmissionStatus.FAILED})

# REJECTED is never entered by the pipeline, only by the admin surface.
PIPELINE_TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.PENDING: frozenset({SubmissionStatus.VALIDATED, SubmissionStatus.FAILED}),
    SubmissionStatus.VALIDATED: frozenset({SubmissionStatus.STORED, SubmissionStatus.FAILED}),
    SubmissionStatus.STORED: frozenset({SubmissionStatus.PROCESSING, SubmissionStatus.FAILED}),
    SubmissionStatus.PROCESSING: frozenset({SubmissionStatus.COMPLETED, SubmissionStatus.FAILED}),
    SubmissionStatus.COMPLETED: frozenset(),
    SubmissionStatus.FAILED: frozenset(),
    SubmissionStatus.REJECTED: frozenset(),
}


def can_transition(current: SubmissionStatus, target: SubmissionStatus) -> bool:
    """Return True if the pipeline may move a submission from current to target."""
    return target in PIPELINE_TRANSITIONS[current]


def stamps_processed_at(status: SubmissionStatus) -> bool:
    """Return True if entering status sets processed_at."""
    return status in PROCESSED_STATUSES
