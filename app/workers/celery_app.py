"""
Celery application configuration.

This module configures the Celery app that carries the submission message
log. Each topic partition is a Redis-backed queue; a worker started with
``-Q`` on a subset of partitions is one member of the consumer group.
Per-partition order holds only with a single process per partition:

    celery -A app.workers.celery_app worker -Q submission.validation.p0 --concurrency=1
    celery -A app.workers.celery_app beat
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging
from celery.signals import worker_ready
from kombu import Queue
from loguru import logger

from app.messaging.topics import MAINTENANCE_QUEUE, all_queues
from submission_core.config import settings
from submission_core.infrastructure.clamav import get_clamav_client
from submission_core.logging import setup_logging

# Create Celery app
celery_app = Celery(
    settings.CONSUMER_GROUP_ID,
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "app.workers.tasks",
    ],
)

# Configuration
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    # Timezone
    timezone="UTC",
    enable_utc=True,
    # Topic partitions, plus the maintenance queue for reconciliation
    task_queues=[Queue(name) for name in all_queues(settings.TOPIC_PARTITIONS)]
    + [Queue(MAINTENANCE_QUEUE)],
    task_default_queue=MAINTENANCE_QUEUE,
    # Delivery: acknowledge after the handler returns, redeliver if the worker dies
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    # Handlers record their own outcome; results are not consumed
    task_ignore_result=True,
    result_expires=3600,
    # Handler deadline (soft limit raises inside the handler, hard limit kills it)
    task_soft_time_limit=settings.HANDLER_TIMEOUT_SECONDS,
    task_time_limit=settings.HANDLER_TIMEOUT_SECONDS + 30,
    # Worker settings
    worker_prefetch_multiplier=1,  # Preserve per-partition order
    worker_concurrency=1,
    # Periodic reconciliation of stalled submissions
    beat_schedule={
        "reconcile-stalled-submissions": {
            "task": "pipeline.reconcile",
            "schedule": float(settings.RECONCILE_AFTER_SECONDS),
            "options": {"queue": MAINTENANCE_QUEUE},
        },
    },
)


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Route Celery's logging through loguru instead of its own handlers."""
    setup_logging()


@worker_ready.connect
def check_virus_scanner(**kwargs):
    """Warn at startup if scanning is enabled but clamd is unreachable."""
    if not settings.VIRUS_SCAN_ENABLED:
        logger.info("Virus scanning disabled")
        return
    client = get_clamav_client()
    if client.ping():
        logger.info(f"clamd reachable at {client.host}:{client.port}")
    else:
        logger.warning(
            f"clamd not reachable at {client.host}:{client.port}; "
            "submissions will fail VirusScanValidator until it is"
        )


logger.info(
    f"Celery app configured with broker: {settings.CELERY_BROKER_URL} "
    f"({settings.TOPIC_PARTITIONS} partitions per topic)"
)
