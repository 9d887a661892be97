"""Validation stage: PENDING -> VALIDATED, or FAILED with the first validator error."""

from __future__ import annotations

from app.messaging.producer import SubmissionProducer
from app.messaging.topics import SUBMISSION_STORAGE
from app.pipeline.base import StageHandler, StageOutcome
from app.submissions.services.repository import SubmissionRepository
from app.validators.orchestrator import ValidationOrchestrator
from submission_core.domain.events import SubmissionEvent
from submission_core.domain.status import Stage, SubmissionStatus


class ValidationStage(StageHandler):
    stage = Stage.VALIDATION
    expected_statuses = (SubmissionStatus.PENDING,)
    failure_prefix = "Validation error"

    def __init__(
        self,
        repository: SubmissionRepository,
        producer: SubmissionProducer,
        orchestrator: ValidationOrchestrator,
    ):
        super().__init__(repository, producer)
        self.orchestrator = orchestrator

    def process(self, event: SubmissionEvent, status: SubmissionStatus) -> StageOutcome:
        result = self.orchestrator.validate(event)
        if not result.valid:
            return self.fail(event, result.describe())

        return self.advance(
            event,
            expected=SubmissionStatus.PENDING,
            target=SubmissionStatus.VALIDATED,
            topics=(SUBMISSION_STORAGE,),
            next_stage=Stage.STORAGE,
        )
