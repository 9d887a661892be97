"""
Validation orchestrator.

Runs the registered validators in ascending order and stops at the first
failure. The validator list is sorted once at construction and never
changes afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from app.validators.base import ValidationResult, Validator
from submission_core.domain.events import SubmissionEvent

ORCHESTRATOR_NAME = "orchestrator"


class ValidationOrchestrator:
    """
    Fail-fast chain of validators.

    Ties in order are broken by validator name so the sequence is
    reproducible across restarts.
    """

    def __init__(self, validators: Iterable[Validator]):
        self._validators: tuple[Validator, ...] = tuple(
            sorted(validators, key=lambda v: (float(v.order), v.name))
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return self._validators

    def validate(self, event: SubmissionEvent) -> ValidationResult:
        """
        Run every validator until one fails.

        A validator that raises is reported as that validator's failure.

        Returns:
            ValidationResult: The first failure unchanged, or a success named
            "orchestrator" when all validators pass.
        """
        sid = event.submission_id
        logger.info(f"[{sid}] Running {len(self._validators)} validators")

        for position, validator in enumerate(self._validators, start=1):
            logger.debug(f"[{sid}] Running {validator.name} (order: {validator.order})")
            try:
                result = validator.validate(event)
            except Exception as e:
                logger.exception(f"[{sid}] {validator.name} raised: {e}")
                result = ValidationResult.failure(validator.name, f"Validator error: {e}")

            if not result.valid:
                logger.warning(
                    f"[{sid}] Validation failed at {result.validator_name} "
                    f"({position}/{len(self._validators)}): {result.error_message}"
                )
                return result

        logger.info(f"[{sid}] All {len(self._validators)} validators passed")
        return ValidationResult.success(ORCHESTRATOR_NAME)

    def describe(self) -> None:
        """Log the registered validators in execution order."""
        logger.info(f"Registered validators ({len(self._validators)}):")
        for validator in self._validators:
            logger.info(f"  - {validator.name} (order: {validator.order})")
