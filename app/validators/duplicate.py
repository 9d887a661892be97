"""Duplicate validator: the earliest submission of given bytes wins."""

from __future__ import annotations

from loguru import logger

from app.submissions.services.repository import SubmissionRepository
from app.validators.base import BaseValidator, ValidationResult
from submission_core.domain.events import SubmissionEvent


class DuplicateValidator(BaseValidator):
    """
    Fails when another submission with the same checksum has a lower id.

    Comparing ids instead of "any other row" keeps exactly one survivor per
    checksum even when two uploads of the same bytes are validated
    concurrently.
    """

    order = 10.0

    def __init__(self, repository: SubmissionRepository):
        self.repository = repository

    def validate(self, event: SubmissionEvent) -> ValidationResult:
        existing = self.repository.find_earlier_with_checksum(event.checksum, event.submission_id)
        if existing is not None:
            logger.warning(
                f"[{event.submission_id}] Duplicate of submission {existing['id']} "
                f"(checksum {event.checksum[:12]})"
            )
            return self.failure(
                f"This file has already been submitted (Submission ID: {existing['id']})"
            )
        return self.success()
