"""
Topic layout of the submission message log.

Every topic is split into partitions, and every partition is a broker queue
named ``{topic}.p{n}``. Events are routed by a stable hash of their key
(the submission id), so one submission always lands on one partition.
"""

from __future__ import annotations

import zlib

SUBMISSION_RECEIVED = "submission.received"
SUBMISSION_VALIDATION = "submission.validation"
SUBMISSION_STORAGE = "submission.storage"
SUBMISSION_PROCESSING = "submission.processing"
SUBMISSION_NOTIFICATION = "submission.notification"
SUBMISSION_FAILED = "submission.failed"
SUBMISSION_COMPLETED = "submission.completed"

ALL_TOPICS = (
    SUBMISSION_RECEIVED,
    SUBMISSION_VALIDATION,
    SUBMISSION_STORAGE,
    SUBMISSION_PROCESSING,
    SUBMISSION_NOTIFICATION,
    SUBMISSION_FAILED,
    SUBMISSION_COMPLETED,
)

MAINTENANCE_QUEUE = "submission.maintenance"


def partition_for(key: str, partitions: int) -> int:
    """Stable partition for a key (crc32 is identical across processes)."""
    if partitions < 1:
        raise ValueError("partitions must be >= 1")
    return zlib.crc32(key.encode("utf-8")) % partitions


def queue_name(topic: str, partition: int) -> str:
    return f"{topic}.p{partition}"


def task_name(topic: str) -> str:
    """Name of the Celery task consuming a topic."""
    return f"pipeline.{topic}"


def all_queues(partitions: int, topics: tuple[str, ...] = ALL_TOPICS) -> list[str]:
    return [queue_name(topic, p) for topic in topics for p in range(partitions)]
