"""
Processing stage: STORED -> PROCESSING -> COMPLETED.

PROCESSING is committed before the work starts so that operators can see
which submissions are in flight. A delivery that finds the row already in
PROCESSING resumes it (the worker died between the two commits).
"""

from __future__ import annotations

import zipfile
from typing import Any

from loguru import logger

from app.messaging.producer import SubmissionProducer
from app.messaging.topics import SUBMISSION_COMPLETED, SUBMISSION_NOTIFICATION
from app.pipeline.base import StageHandler, StageOutcome
from app.submissions.services.file_storage import FileStorageService
from app.submissions.services.repository import SubmissionRepository
from submission_core.domain.events import SubmissionEvent
from submission_core.domain.exceptions import IntegrityViolationError
from submission_core.domain.status import Stage, SubmissionStatus


def build_manifest(storage_path: str) -> dict[str, Any]:
    """Summarize archive contents without extracting them."""
    with zipfile.ZipFile(storage_path) as archive:
        files = [e for e in archive.infolist() if not e.is_dir()]
        return {
            "entries": len(files),
            "directories": len(archive.infolist()) - len(files),
            "uncompressed_bytes": sum(e.file_size for e in files),
            "compressed_bytes": sum(e.compress_size for e in files),
        }


class ProcessingStage(StageHandler):
    stage = Stage.PROCESSING
    expected_statuses = (SubmissionStatus.STORED, SubmissionStatus.PROCESSING)
    failure_prefix = "Processing error"

    def __init__(
        self,
        repository: SubmissionRepository,
        producer: SubmissionProducer,
        storage: FileStorageService,
    ):
        super().__init__(repository, producer)
        self.storage = storage

    def process(self, event: SubmissionEvent, status: SubmissionStatus) -> StageOutcome:
        sid = event.submission_id

        if status == SubmissionStatus.STORED:
            if not self.repository.transition(sid, SubmissionStatus.STORED, SubmissionStatus.PROCESSING):
                logger.info(f"[{sid}] {self.stage}: already picked up; ignoring replay")
                return StageOutcome.REPLAYED
        else:
            logger.info(f"[{sid}] Resuming submission left in PROCESSING")

        checksum = self.storage.checksum_file(event.storage_path)
        if checksum != event.checksum:
            raise IntegrityViolationError(
                f"Checksum mismatch (expected {event.checksum[:12]}, got {checksum[:12]})"
            )

        manifest = build_manifest(event.storage_path)
        logger.info(f"[{sid}] Processed {event.original_file_name}: {manifest}")

        return self.advance(
            event,
            expected=SubmissionStatus.PROCESSING,
            target=SubmissionStatus.COMPLETED,
            topics=(SUBMISSION_NOTIFICATION, SUBMISSION_COMPLETED),
            next_stage=Stage.NOTIFICATION,
        )
