from app.validators.base import BaseValidator, ValidationResult, Validator
from app.validators.orchestrator import ValidationOrchestrator

__all__ = ["BaseValidator", "ValidationResult", "Validator", "ValidationOrchestrator"]
