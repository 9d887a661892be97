"""
Reconciliation of stalled submissions.

A stage commits its status change before it publishes. If the process dies
between the two, the row sits in a non-terminal status with no event in
flight. This pass re-emits the event that the row's status expects next;
stage handlers are idempotent, so a duplicate is harmless.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from loguru import logger

from app.messaging.producer import SubmissionProducer
from app.messaging.topics import (
    SUBMISSION_PROCESSING,
    SUBMISSION_STORAGE,
    SUBMISSION_VALIDATION,
)
from app.submissions.services.repository import SubmissionRepository
from submission_core.config import settings
from submission_core.domain.events import SubmissionEvent
from submission_core.domain.status import Stage, SubmissionStatus

# status -> (topic, current_stage, next_stage) of the event that moves it on
RESUME_ROUTES: dict[SubmissionStatus, tuple[str, str, str]] = {
    SubmissionStatus.PENDING: (SUBMISSION_VALIDATION, Stage.RECEIVED, Stage.VALIDATION),
    SubmissionStatus.VALIDATED: (SUBMISSION_STORAGE, Stage.VALIDATION, Stage.STORAGE),
    SubmissionStatus.STORED: (SUBMISSION_PROCESSING, Stage.STORAGE, Stage.PROCESSING),
    SubmissionStatus.PROCESSING: (SUBMISSION_PROCESSING, Stage.STORAGE, Stage.PROCESSING),
}


def reconcile_stalled(
    repository: SubmissionRepository,
    producer: SubmissionProducer,
    older_than_seconds: int | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """
    Re-emit events for submissions whose status has not moved for a while.

    Args:
        repository: Submission store.
        producer: Publisher for the re-emitted events.
        older_than_seconds: Minimum age of updated_at (defaults to
            RECONCILE_AFTER_SECONDS).
        dry_run: Only report what would be re-emitted.

    Returns:
        dict: Summary with found, resent and failed counts.
    """
    age = older_than_seconds if older_than_seconds is not None else settings.RECONCILE_AFTER_SECONDS
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=age)

    stalled = repository.find_stalled(RESUME_ROUTES.keys(), cutoff)
    logger.info(f"Reconciliation found {len(stalled)} stalled submissions (older than {age}s)")

    resent = 0
    failed = 0
    for record in stalled:
        status = SubmissionStatus(record["status"])
        topic, current_stage, next_stage = RESUME_ROUTES[status]

        if dry_run:
            logger.info(f"[DRY RUN] Would resend {record['id']} ({status.value}) to {topic}")
            continue

        event = SubmissionEvent.from_record(record, current_stage=current_stage, next_stage=next_stage)
        if producer.send_event(topic, event) is None:
            failed += 1
            continue

        repository.touch(record["id"], status)
        resent += 1

    summary = {"found": len(stalled), "resent": resent, "failed": failed, "dry_run": dry_run}
    logger.info(f"Reconciliation complete: {summary}")
    return summary
