"""
Pipeline factory.

Builds each stage handler once per worker process.
"""

from __future__ import annotations

from functools import lru_cache

from app.pipeline.notification import NotificationStage
from app.pipeline.processing import ProcessingStage
from app.pipeline.storage import StorageStage
from app.pipeline.validation import ValidationStage
from app.submissions.factory import get_file_storage, get_producer, get_repository
from app.validators.orchestrator import ValidationOrchestrator
from app.validators.registry import build_orchestrator
from submission_core.config import settings
from submission_core.infrastructure.clamav import get_clamav_client


@lru_cache()
def get_orchestrator() -> ValidationOrchestrator:
    """Get the validator chain, sorted once at startup."""
    return build_orchestrator(settings, get_repository(), get_clamav_client())


@lru_cache()
def get_validation_stage() -> ValidationStage:
    return ValidationStage(get_repository(), get_producer(), get_orchestrator())


@lru_cache()
def get_storage_stage() -> StorageStage:
    return StorageStage(get_repository(), get_producer(), get_file_storage())


@lru_cache()
def get_processing_stage() -> ProcessingStage:
    return ProcessingStage(get_repository(), get_producer(), get_file_storage())


@lru_cache()
def get_notification_stage() -> NotificationStage:
    return NotificationStage()
