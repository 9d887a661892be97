"""
Storage stage: VALIDATED -> STORED.

The archive was already written at ingress; this stage confirms it is
still present and intact before handing it to processing.
"""

from __future__ import annotations

from loguru import logger

from app.messaging.producer import SubmissionProducer
from app.messaging.topics import SUBMISSION_PROCESSING
from app.pipeline.base import StageHandler, StageOutcome
from app.submissions.services.file_storage import FileStorageService
from app.submissions.services.repository import SubmissionRepository
from submission_core.domain.events import SubmissionEvent
from submission_core.domain.exceptions import IntegrityViolationError, StorageFailureError
from submission_core.domain.status import Stage, SubmissionStatus


class StorageStage(StageHandler):
    stage = Stage.STORAGE
    expected_statuses = (SubmissionStatus.VALIDATED,)
    failure_prefix = "Storage error"

    def __init__(
        self,
        repository: SubmissionRepository,
        producer: SubmissionProducer,
        storage: FileStorageService,
    ):
        super().__init__(repository, producer)
        self.storage = storage

    def process(self, event: SubmissionEvent, status: SubmissionStatus) -> StageOutcome:
        if not self.storage.exists(event.storage_path):
            raise StorageFailureError(f"Stored file is missing: {event.file_name}")

        actual = self.storage.size(event.storage_path)
        if actual != event.file_size:
            raise IntegrityViolationError(
                f"Stored file size {actual} does not match recorded size {event.file_size}"
            )

        logger.debug(f"[{event.submission_id}] Confirmed {event.storage_path} ({actual} bytes)")
        return self.advance(
            event,
            expected=SubmissionStatus.VALIDATED,
            target=SubmissionStatus.STORED,
            topics=(SUBMISSION_PROCESSING,),
            next_stage=Stage.PROCESSING,
        )
