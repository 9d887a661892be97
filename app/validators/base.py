"""
Validator framework primitives.

A validator inspects a SubmissionEvent and returns a ValidationResult. It
exposes a stable name for error attribution and a float order so that new
validators can be slotted between existing ones.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from submission_core.domain.events import SubmissionEvent


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validator, or of the whole chain."""

    valid: bool
    validator_name: str
    error_message: str | None = None

    @classmethod
    def success(cls, validator_name: str) -> "ValidationResult":
        return cls(valid=True, validator_name=validator_name)

    @classmethod
    def failure(cls, validator_name: str, error_message: str) -> "ValidationResult":
        return cls(valid=False, validator_name=validator_name, error_message=error_message)

    def describe(self) -> str:
        """Failure text as recorded on the submission: ``name: message``."""
        if self.valid:
            return f"{self.validator_name}: passed"
        return f"{self.validator_name}: {self.error_message}"


@runtime_checkable
class Validator(Protocol):
    """Anything the orchestrator can run."""

    @property
    def name(self) -> str:
        ...

    @property
    def order(self) -> float:
        ...

    def validate(self, event: SubmissionEvent) -> ValidationResult:
        ...


class BaseValidator(ABC):
    """Convenience base: name defaults to the class name."""

    order: float = 100.0

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def validate(self, event: SubmissionEvent) -> ValidationResult:
        """Validate a submission snapshot."""

    def success(self) -> ValidationResult:
        return ValidationResult.success(self.name)

    def failure(self, message: str) -> ValidationResult:
        return ValidationResult.failure(self.name, message)
