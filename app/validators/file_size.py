"""
File size validator.

Checks the reported size against configured limits, then that the stored
file exists and still has the reported size.
"""

from __future__ import annotations

import os

from loguru import logger

from app.validators.base import BaseValidator, ValidationResult
from submission_core.domain.events import SubmissionEvent

UNITS = "KMGTPE"


def format_bytes(size: int) -> str:
    """Human-readable size at the nearest binary unit, e.g. ``1.50 MB``."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    unit = ""
    for unit in UNITS:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.2f} {unit}B"


class FileSizeValidator(BaseValidator):
    order = 3.0

    def __init__(self, min_size: int, max_size: int):
        self.min_size = min_size
        self.max_size = max_size

    def validate(self, event: SubmissionEvent) -> ValidationResult:
        size = event.file_size

        if size < self.min_size:
            return self.failure(
                f"File is empty or too small (minimum: {format_bytes(self.min_size)}, "
                f"received: {format_bytes(size)})"
            )

        if size > self.max_size:
            return self.failure(
                f"File too large (maximum: {format_bytes(self.max_size)}, "
                f"received: {format_bytes(size)})"
            )

        try:
            if not os.path.isfile(event.storage_path):
                logger.error(f"[{event.submission_id}] File not found at {event.storage_path}")
                return self.failure("File not found at storage location")

            actual = os.path.getsize(event.storage_path)
        except OSError as e:
            logger.error(f"[{event.submission_id}] Error checking file: {e}")
            return self.failure(f"Error verifying file: {e}")

        if actual != size:
            logger.warning(
                f"[{event.submission_id}] File size mismatch: reported={size}, actual={actual}"
            )
            return self.failure(
                f"File size mismatch detected (possible corruption): "
                f"expected {format_bytes(size)}, found {format_bytes(actual)}"
            )

        return self.success()
