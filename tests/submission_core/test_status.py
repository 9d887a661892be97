"""Unit tests for the submission status machine."""

import pytest

from submission_core.domain.status import (
    PIPELINE_TRANSITIONS,
    SubmissionStatus,
    can_transition,
    stamps_processed_at,
)

S = SubmissionStatus


class TestPipelineTransitions:
    """Tests for the allowed transition graph."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING, S.VALIDATED),
            (S.PENDING, S.FAILED),
            (S.VALIDATED, S.STORED),
            (S.VALIDATED, S.FAILED),
            (S.STORED, S.PROCESSING),
            (S.STORED, S.FAILED),
            (S.PROCESSING, S.COMPLETED),
            (S.PROCESSING, S.FAILED),
        ],
    )
    def test_allowed_transitions(self, current, target):
        assert can_transition(current, target) is True

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING, S.STORED),
            (S.PENDING, S.COMPLETED),
            (S.VALIDATED, S.PENDING),
            (S.COMPLETED, S.FAILED),
            (S.FAILED, S.PENDING),
        ],
    )
    def test_skips_and_regressions_are_rejected(self, current, target):
        assert can_transition(current, target) is False

    def test_pipeline_never_enters_rejected(self):
        for targets in PIPELINE_TRANSITIONS.values():
            assert S.REJECTED not in targets

    def test_terminal_statuses_have_no_successors(self):
        for status in (S.COMPLETED, S.FAILED, S.REJECTED):
            assert status.is_terminal
            assert PIPELINE_TRANSITIONS[status] == frozenset()

    def test_in_flight_statuses_are_not_terminal(self):
        for status in (S.PENDING, S.VALIDATED, S.STORED, S.PROCESSING):
            assert not status.is_terminal


class TestProcessedAt:
    """processed_at is stamped only for COMPLETED and FAILED."""

    def test_completed_and_failed_stamp(self):
        assert stamps_processed_at(S.COMPLETED)
        assert stamps_processed_at(S.FAILED)

    def test_other_statuses_do_not_stamp(self):
        for status in (S.PENDING, S.VALIDATED, S.STORED, S.PROCESSING, S.REJECTED):
            assert not stamps_processed_at(status)
