"""
Submissions module factory.

Factory functions that wire the repository, file storage and producer into
the services used by the API, the workers and the maintenance scripts.
"""

from __future__ import annotations

from functools import lru_cache

from app.messaging.producer import SubmissionProducer
from app.submissions.services.file_storage import FileStorageService
from app.submissions.services.repository import SubmissionRepository
from app.submissions.services.submission_service import SubmissionService
from app.workers.celery_app import celery_app


@lru_cache()
def get_repository() -> SubmissionRepository:
    """Get the submission repository instance."""
    return SubmissionRepository()


@lru_cache()
def get_file_storage() -> FileStorageService:
    """Get the file storage service instance."""
    return FileStorageService()


@lru_cache()
def get_producer() -> SubmissionProducer:
    """Get the event producer bound to the Celery app."""
    return SubmissionProducer(celery_app)


def get_submission_service() -> SubmissionService:
    """Get the ingress/admin service with its collaborators wired in."""
    return SubmissionService(
        repository=get_repository(),
        storage=get_file_storage(),
        producer=get_producer(),
    )
