"""
Publisher for submission events.

Events are sent to the partition queue chosen by the submission id. A
publish failure is logged and reported to the caller as None; it never
raises, since the database commit that preceded it is already durable
and reconciliation re-emits stalled submissions.
"""

from __future__ import annotations

from celery import Celery
from loguru import logger

from app.messaging.topics import partition_for, queue_name, task_name
from submission_core.config import settings
from submission_core.domain.events import SubmissionEvent


class SubmissionProducer:
    """
    Sends SubmissionEvents to topics of the message log.

    Usage:
        producer = SubmissionProducer(celery_app)
        producer.send_event(SUBMISSION_VALIDATION, event)
    """

    def __init__(self, app: Celery, partitions: int | None = None):
        self.app = app
        self.partitions = partitions or settings.TOPIC_PARTITIONS

    def send_event(self, topic: str, event: SubmissionEvent) -> str | None:
        """
        Publish one event keyed by its submission id.

        Returns:
            str: Broker message id on success, None if the publish failed.
        """
        partition = partition_for(event.key, self.partitions)
        queue = queue_name(topic, partition)
        logger.info(
            f"[{event.submission_id}] Sending {event.status.value} to {topic} "
            f"(partition {partition})"
        )

        try:
            result = self.app.send_task(
                task_name(topic),
                args=[event.to_payload()],
                queue=queue,
                routing_key=queue,
            )
        except Exception as e:
            logger.error(f"[{event.submission_id}] Failed to send event to {topic}: {e}")
            return None

        logger.debug(f"[{event.submission_id}] Sent to {queue} as {result.id}")
        return result.id
