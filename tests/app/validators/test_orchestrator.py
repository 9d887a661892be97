"""Unit tests for the validation orchestrator."""

from unittest.mock import MagicMock

import pytest

from app.validators.base import BaseValidator, ValidationResult
from app.validators.orchestrator import ValidationOrchestrator


class StubValidator(BaseValidator):
    def __init__(self, name, order, result=True, calls=None):
        self._name = name
        self.order = order
        self._result = result
        self.calls = calls if calls is not None else []

    @property
    def name(self):
        return self._name

    def validate(self, event):
        self.calls.append(self._name)
        if self._result is True:
            return self.success()
        if isinstance(self._result, Exception):
            raise self._result
        return self.failure(self._result)


class TestOrdering:
    """Validators run in ascending order."""

    def test_sorted_by_order(self):
        calls = []
        orchestrator = ValidationOrchestrator(
            [
                StubValidator("c", 20, calls=calls),
                StubValidator("a", 3, calls=calls),
                StubValidator("b", 10.5, calls=calls),
            ]
        )

        orchestrator.validate(MagicMock(submission_id=1))

        assert calls == ["a", "b", "c"]

    def test_ties_broken_by_name(self):
        orchestrator = ValidationOrchestrator(
            [StubValidator("zeta", 5), StubValidator("alpha", 5)]
        )

        assert [v.name for v in orchestrator.validators] == ["alpha", "zeta"]

    def test_validator_list_is_immutable(self):
        validators = [StubValidator("a", 1)]
        orchestrator = ValidationOrchestrator(validators)
        validators.append(StubValidator("b", 2))

        assert isinstance(orchestrator.validators, tuple)
        assert len(orchestrator.validators) == 1


class TestFailFast:
    """The first failure is returned unchanged."""

    def test_all_pass_returns_orchestrator_success(self):
        orchestrator = ValidationOrchestrator([StubValidator("a", 1), StubValidator("b", 2)])

        result = orchestrator.validate(MagicMock(submission_id=1))

        assert result == ValidationResult.success("orchestrator")

    def test_first_failure_stops_chain(self):
        calls = []
        orchestrator = ValidationOrchestrator(
            [
                StubValidator("a", 1, calls=calls),
                StubValidator("b", 2, result="bad", calls=calls),
                StubValidator("c", 3, result="worse", calls=calls),
            ]
        )

        result = orchestrator.validate(MagicMock(submission_id=1))

        assert result == ValidationResult.failure("b", "bad")
        assert calls == ["a", "b"]

    def test_raising_validator_is_reported_as_its_failure(self):
        orchestrator = ValidationOrchestrator(
            [StubValidator("boom", 1, result=RuntimeError("kaput")), StubValidator("b", 2)]
        )

        result = orchestrator.validate(MagicMock(submission_id=1))

        assert not result.valid
        assert result.validator_name == "boom"
        assert "kaput" in result.error_message

    def test_empty_chain_passes(self):
        assert ValidationOrchestrator([]).validate(MagicMock(submission_id=1)).valid


class TestValidationResult:
    """Result formatting."""

    def test_describe_failure(self):
        result = ValidationResult.failure("FilenameValidator", "Filename cannot be empty")

        assert result.describe() == "FilenameValidator: Filename cannot be empty"

    def test_results_are_frozen(self):
        result = ValidationResult.success("x")

        with pytest.raises(AttributeError):
            result.valid = False
