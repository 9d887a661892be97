"""
Celery task definitions for the submission pipeline.

One task per topic; every partition queue of a topic is consumed by that
topic's task. Handlers never raise, so each delivery is acknowledged once
the handler returns. A payload that cannot be decoded is logged and
discarded.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from app.messaging.topics import (
    SUBMISSION_COMPLETED,
    SUBMISSION_FAILED,
    SUBMISSION_NOTIFICATION,
    SUBMISSION_PROCESSING,
    SUBMISSION_RECEIVED,
    SUBMISSION_STORAGE,
    SUBMISSION_VALIDATION,
    task_name,
)
from app.pipeline.factory import (
    get_notification_stage,
    get_processing_stage,
    get_storage_stage,
    get_validation_stage,
)
from app.submissions.factory import get_producer, get_repository
from app.submissions.services.reconciliation import reconcile_stalled
from app.workers.celery_app import celery_app
from submission_core.domain.events import SubmissionEvent

DISCARDED = "discarded"


def decode_event(topic: str, payload: Any) -> SubmissionEvent | None:
    """Parse a payload, or log and return None if it is malformed."""
    try:
        return SubmissionEvent.from_payload(payload)
    except ValidationError as e:
        logger.error(f"Discarding malformed event on {topic}: {e.error_count()} errors: {payload!r:.200}")
        return None


@celery_app.task(name=task_name(SUBMISSION_VALIDATION))
def handle_validation(payload: dict) -> str:
    """Run the validator chain for a PENDING submission."""
    event = decode_event(SUBMISSION_VALIDATION, payload)
    if event is None:
        return DISCARDED
    return get_validation_stage().handle(event).value


@celery_app.task(name=task_name(SUBMISSION_STORAGE))
def handle_storage(payload: dict) -> str:
    """Confirm the stored archive of a VALIDATED submission."""
    event = decode_event(SUBMISSION_STORAGE, payload)
    if event is None:
        return DISCARDED
    return get_storage_stage().handle(event).value


@celery_app.task(name=task_name(SUBMISSION_PROCESSING))
def handle_processing(payload: dict) -> str:
    """Process a STORED submission through to COMPLETED."""
    event = decode_event(SUBMISSION_PROCESSING, payload)
    if event is None:
        return DISCARDED
    return get_processing_stage().handle(event).value


def _notify(topic: str, payload: dict) -> str:
    event = decode_event(topic, payload)
    if event is None:
        return DISCARDED
    return get_notification_stage().handle(topic, event).value


@celery_app.task(name=task_name(SUBMISSION_RECEIVED))
def handle_received(payload: dict) -> str:
    return _notify(SUBMISSION_RECEIVED, payload)


@celery_app.task(name=task_name(SUBMISSION_NOTIFICATION))
def handle_notification(payload: dict) -> str:
    return _notify(SUBMISSION_NOTIFICATION, payload)


@celery_app.task(name=task_name(SUBMISSION_COMPLETED))
def handle_completed(payload: dict) -> str:
    return _notify(SUBMISSION_COMPLETED, payload)


@celery_app.task(name=task_name(SUBMISSION_FAILED))
def handle_failed(payload: dict) -> str:
    return _notify(SUBMISSION_FAILED, payload)


@celery_app.task(name="pipeline.reconcile")
def reconcile(older_than_seconds: int | None = None) -> dict:
    """Re-emit events for submissions stuck between a commit and its publish."""
    return reconcile_stalled(get_repository(), get_producer(), older_than_seconds)
