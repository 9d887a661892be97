"""
Notification stage: leaf consumer of the received, notification, completed
and failed topics. It reports lifecycle milestones and changes no state.
"""

from __future__ import annotations

from loguru import logger

from app.messaging.topics import (
    SUBMISSION_COMPLETED,
    SUBMISSION_FAILED,
    SUBMISSION_NOTIFICATION,
    SUBMISSION_RECEIVED,
)
from app.pipeline.base import StageOutcome
from submission_core.domain.events import SubmissionEvent

NOTIFICATION_TOPICS = (
    SUBMISSION_RECEIVED,
    SUBMISSION_NOTIFICATION,
    SUBMISSION_COMPLETED,
    SUBMISSION_FAILED,
)


class NotificationStage:
    """Logs one line per lifecycle milestone."""

    def handle(self, topic: str, event: SubmissionEvent) -> StageOutcome:
        sid = event.submission_id
        who = event.submitted_by or "anonymous"

        if topic == SUBMISSION_RECEIVED:
            logger.info(f"[{sid}] Received {event.original_file_name} from {who}")
        elif topic == SUBMISSION_NOTIFICATION:
            logger.info(f"[{sid}] Notify {who}: {event.original_file_name} is {event.status.value}")
        elif topic == SUBMISSION_COMPLETED:
            logger.info(f"[{sid}] Completed {event.original_file_name} ({event.file_size} bytes)")
        elif topic == SUBMISSION_FAILED:
            logger.warning(f"[{sid}] Failed at {event.current_stage}: {event.error_message}")
        else:
            logger.warning(f"[{sid}] Notification received event on unexpected topic {topic}")

        return StageOutcome.CONSUMED
