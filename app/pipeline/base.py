"""
Stage handler base class.

Every pipeline stage follows the same frame:

1. Load the row and check it is in a status this stage consumes. Anything
   else is a replayed or superseded event: log it and acknowledge.
2. Do the stage's work.
3. Commit the status change with a compare-and-set update.
4. Publish the outbound event(s).

Any exception raised by the work is turned into a FAILED transition and an
event on the failed topic; nothing propagates to the consumer loop.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum

from loguru import logger

from app.messaging.producer import SubmissionProducer
from app.messaging.topics import SUBMISSION_FAILED
from app.submissions.services.repository import SubmissionRepository
from submission_core.domain.events import SubmissionEvent
from submission_core.domain.status import Stage, SubmissionStatus
from submission_core.runtime.errors import ServiceError


class StageOutcome(str, Enum):
    """What a handler did with one delivery."""

    ADVANCED = "advanced"
    FAILED = "failed"
    REPLAYED = "replayed"
    CONSUMED = "consumed"


class StageHandler(ABC):
    """
    Template for the validation, storage and processing stages.

    Subclasses set ``stage``, ``expected_statuses`` and ``failure_prefix``
    and implement ``process``.
    """

    stage: str
    expected_statuses: tuple[SubmissionStatus, ...]
    failure_prefix: str = "Processing error"

    def __init__(self, repository: SubmissionRepository, producer: SubmissionProducer):
        self.repository = repository
        self.producer = producer

    def handle(self, event: SubmissionEvent) -> StageOutcome:
        """Process one delivery. Never raises."""
        sid = event.submission_id
        logger.info(f"[{sid}] {self.stage} received event ({event.current_stage} -> {event.next_stage})")

        try:
            record = self.repository.get(sid)
        except Exception as e:
            return self.fail(event, self.failure_message(e))

        if record is None:
            logger.warning(f"[{sid}] {self.stage}: submission no longer exists, discarding event")
            return StageOutcome.REPLAYED

        status = SubmissionStatus(record["status"])
        if status.is_terminal:
            logger.info(f"[{sid}] {self.stage}: submission already {status.value}; ignoring replay")
            return StageOutcome.REPLAYED
        if status not in self.expected_statuses:
            logger.info(
                f"[{sid}] {self.stage}: submission is {status.value}, "
                f"expected {self._names(self.expected_statuses)}; ignoring replay"
            )
            return StageOutcome.REPLAYED

        try:
            return self.process(event, status)
        except ServiceError as e:
            if e.retryable:
                logger.exception(f"[{sid}] {self.stage} failed: {e}")
            else:
                logger.warning(f"[{sid}] {self.stage} rejected: {e}")
            return self.fail(event, self.failure_message(e))
        except Exception as e:
            logger.exception(f"[{sid}] {self.stage} failed: {e}")
            return self.fail(event, self.failure_message(e))

    @abstractmethod
    def process(self, event: SubmissionEvent, status: SubmissionStatus) -> StageOutcome:
        """Do the stage's work for a submission currently in status."""

    def failure_message(self, error: Exception) -> str:
        detail = error.message_safe if isinstance(error, ServiceError) else str(error)
        return f"{self.failure_prefix}: {detail or type(error).__name__}"

    @property
    def failable_statuses(self) -> tuple[SubmissionStatus, ...]:
        """Statuses from which this stage may move a submission to FAILED."""
        return self.expected_statuses

    def advance(
        self,
        event: SubmissionEvent,
        expected: SubmissionStatus | Iterable[SubmissionStatus],
        target: SubmissionStatus,
        topics: Iterable[str],
        next_stage: str | None,
    ) -> StageOutcome:
        """Commit expected -> target, then publish to every topic."""
        sid = event.submission_id
        if not self.repository.transition(sid, expected, target):
            logger.info(f"[{sid}] {self.stage}: status moved concurrently; ignoring replay")
            return StageOutcome.REPLAYED

        outbound = event.advance(target, current_stage=self.stage, next_stage=next_stage)
        for topic in topics:
            self.producer.send_event(topic, outbound)

        logger.info(f"[{sid}] {self.stage} complete: {target.value}")
        return StageOutcome.ADVANCED

    def fail(self, event: SubmissionEvent, message: str) -> StageOutcome:
        """Commit FAILED with message, then publish to the failed topic."""
        sid = event.submission_id
        try:
            moved = self.repository.transition(
                sid, self.failable_statuses, SubmissionStatus.FAILED, error_message=message
            )
        except Exception as e:
            # Left for reconciliation to re-drive.
            logger.error(f"[{sid}] Could not record failure ({message}): {e}")
            return StageOutcome.FAILED

        if not moved:
            logger.info(f"[{sid}] {self.stage}: not in a failable status; ignoring replay")
            return StageOutcome.REPLAYED

        outbound = event.advance(
            SubmissionStatus.FAILED,
            current_stage=self.stage,
            next_stage=Stage.FAILED,
            error_message=message,
        )
        self.producer.send_event(SUBMISSION_FAILED, outbound)
        logger.warning(f"[{sid}] {self.stage} failed: {message}")
        return StageOutcome.FAILED

    @staticmethod
    def _names(statuses: Iterable[SubmissionStatus]) -> str:
        return "|".join(s.value for s in statuses)
