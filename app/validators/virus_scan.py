"""Virus scan validator. Fails closed when the scanner is unreachable."""

from __future__ import annotations

from loguru import logger

from app.validators.base import BaseValidator, ValidationResult
from submission_core.domain.events import SubmissionEvent
from submission_core.infrastructure.clamav import ClamAVClient
from submission_core.runtime.errors import ServiceError


class VirusScanValidator(BaseValidator):
    order = 20.0

    def __init__(self, scanner: ClamAVClient, enabled: bool = True):
        self.scanner = scanner
        self.enabled = enabled

    def validate(self, event: SubmissionEvent) -> ValidationResult:
        sid = event.submission_id
        if not self.enabled:
            logger.info(f"[{sid}] Virus scan skipped (scanner disabled)")
            return self.success()

        try:
            result = self.scanner.scan_file(event.storage_path)
        except Exception as e:
            message = e.message_safe if isinstance(e, ServiceError) else str(e)
            logger.error(f"[{sid}] Virus scan failed: {message}")
            return self.failure(f"Virus scan failed: {message}")

        if not result.clean:
            names = ", ".join(result.viruses)
            logger.error(f"[{sid}] VIRUS DETECTED: {names}")
            return self.failure(f"Virus detected: {names}")

        logger.info(f"[{sid}] Virus scan passed")
        return self.success()
