"""
SubmissionService: ingress and admin operations on submissions.

Ingress stores the archive, inserts the PENDING row and emits the first
events. It never blocks on validation; the pipeline stages take over from
the message log.
"""

from __future__ import annotations

from typing import Any, BinaryIO

from loguru import logger

from app.messaging.producer import SubmissionProducer
from app.messaging.topics import SUBMISSION_RECEIVED, SUBMISSION_VALIDATION
from app.submissions.services.file_storage import FileStorageService
from app.submissions.services.repository import SubmissionRepository
from submission_core.domain.events import SubmissionEvent
from submission_core.domain.exceptions import (
    StorageFailureError,
    SubmissionNotFoundError,
)
from submission_core.domain.status import Stage, SubmissionStatus

DEFAULT_CONTENT_TYPE = "application/zip"


class SubmissionService:
    """
    Accepts uploads and serves the query and admin surface.

    Usage:
        service = SubmissionService(repository, storage, producer)
        record = service.create_submission(fileobj, "project.zip", "application/zip")
    """

    def __init__(
        self,
        repository: SubmissionRepository,
        storage: FileStorageService,
        producer: SubmissionProducer,
    ):
        self.repository = repository
        self.storage = storage
        self.producer = producer

    def create_submission(
        self,
        fileobj: BinaryIO,
        filename: str | None,
        content_type: str | None = None,
        description: str | None = None,
        submitted_by: str | None = None,
    ) -> dict[str, Any]:
        """
        Accept an upload: validate the envelope, store the bytes, insert the
        PENDING row and publish to the received and validation topics.

        Returns:
            dict: The inserted submission row.

        Raises:
            InvalidSubmissionError: Not a ZIP, or an empty/corrupt archive.
            StorageFailureError: The bytes or the row could not be persisted.
        """
        self.storage.validate_zip(fileobj, filename)
        checksum = self.storage.compute_checksum(fileobj)

        stored_filename, storage_path, size = self.storage.store(fileobj, filename)

        try:
            record = self.repository.insert(
                file_name=stored_filename,
                original_file_name=filename,
                file_size=size,
                content_type=content_type or DEFAULT_CONTENT_TYPE,
                storage_path=storage_path,
                checksum=checksum,
                description=description,
                submitted_by=submitted_by,
            )
        except Exception as e:
            # The stored file is left in place for operator cleanup.
            logger.error(f"Failed to record submission for {filename}: {e}")
            raise StorageFailureError("Failed to record submission", cause=e) from e

        event = SubmissionEvent.from_record(
            record, current_stage=Stage.RECEIVED, next_stage=Stage.VALIDATION
        )
        self.producer.send_event(SUBMISSION_RECEIVED, event)
        self.producer.send_event(SUBMISSION_VALIDATION, event)

        logger.info(f"[{record['id']}] Submission accepted ({size} bytes, sha256={checksum[:12]})")
        return record

    def get_submission(self, submission_id: int) -> dict[str, Any]:
        """
        Raises:
            SubmissionNotFoundError: If no row has this id.
        """
        record = self.repository.get(submission_id)
        if record is None:
            raise SubmissionNotFoundError(submission_id)
        return record

    def list_submissions(
        self,
        status: SubmissionStatus | None = None,
        submitted_by: str | None = None,
    ) -> list[dict[str, Any]]:
        """List submissions; a status filter takes precedence over submitted_by."""
        if status is not None:
            return self.repository.list_by_status(status)
        if submitted_by is not None:
            return self.repository.list_by_submitter(submitted_by)
        return self.repository.list_all()

    def update_status(self, submission_id: int, status: SubmissionStatus) -> dict[str, Any]:
        """
        Admin override: set any status, bypassing the pipeline graph.

        Raises:
            SubmissionNotFoundError: If no row has this id.
        """
        record = self.repository.force_status(submission_id, status)
        if record is None:
            raise SubmissionNotFoundError(submission_id)
        logger.warning(f"[{submission_id}] Status overridden to {status.value}")
        return record

    def delete_submission(self, submission_id: int) -> None:
        """
        Delete the stored archive, then the row.

        Raises:
            SubmissionNotFoundError: If no row has this id.
            StorageFailureError: If the archive could not be removed; the row is kept.
        """
        record = self.get_submission(submission_id)
        self.storage.delete(record["storage_path"])
        if not self.repository.delete(submission_id):
            raise SubmissionNotFoundError(submission_id)
        logger.info(f"[{submission_id}] Submission deleted")

