"""
Default validator registry.

Builds the validator set and the orchestrator once at startup.
"""

from __future__ import annotations

from app.submissions.services.repository import SubmissionRepository
from app.validators.base import Validator
from app.validators.duplicate import DuplicateValidator
from app.validators.file_content import FileContentValidator
from app.validators.file_size import FileSizeValidator
from app.validators.filename import FilenameValidator
from app.validators.orchestrator import ValidationOrchestrator
from app.validators.virus_scan import VirusScanValidator
from submission_core.config import Settings
from submission_core.infrastructure.clamav import ClamAVClient


def build_default_validators(
    settings: Settings,
    repository: SubmissionRepository,
    scanner: ClamAVClient,
) -> list[Validator]:
    return [
        FileSizeValidator(
            min_size=settings.SUBMISSION_MIN_FILE_SIZE,
            max_size=settings.SUBMISSION_MAX_FILE_SIZE,
        ),
        FilenameValidator(),
        DuplicateValidator(repository),
        FileContentValidator(
            max_entries=settings.SUBMISSION_MAX_ZIP_ENTRIES,
            max_ratio=settings.SUBMISSION_MAX_COMPRESSION_RATIO,
        ),
        VirusScanValidator(scanner, enabled=settings.VIRUS_SCAN_ENABLED),
    ]


def build_orchestrator(
    settings: Settings,
    repository: SubmissionRepository,
    scanner: ClamAVClient,
) -> ValidationOrchestrator:
    orchestrator = ValidationOrchestrator(build_default_validators(settings, repository, scanner))
    orchestrator.describe()
    return orchestrator
