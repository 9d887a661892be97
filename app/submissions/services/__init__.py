"""Submission services: persistence, file storage, ingress/admin and reconciliation."""

from app.submissions.services.file_storage import FileStorageService
from app.submissions.services.repository import SubmissionRepository
from app.submissions.services.submission_service import SubmissionService

__all__ = ["FileStorageService", "SubmissionRepository", "SubmissionService"]
