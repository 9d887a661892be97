"""
Unit tests for the PostgreSQL submission repository.

The repository should:
1. Insert new submissions in PENDING
2. Apply status changes only from the expected predecessor status
3. Stamp processed_at for COMPLETED and FAILED only
"""

from datetime import datetime, timezone

import pytest

from app.submissions.services.repository import ADMIN_FAILED_MESSAGE, COLUMNS, SubmissionRepository
from submission_core.domain.exceptions import InvalidTransitionError
from submission_core.domain.status import SubmissionStatus


def row(record):
    return tuple(record[c] for c in COLUMNS)


class TestRepositoryInsert:
    """Tests for inserting submissions."""

    def test_insert_returns_row_as_dict(self, mock_postgres, make_record):
        mock_postgres["cursor"].fetchone.return_value = row(make_record(id=5))

        record = SubmissionRepository().insert(
            file_name="abc_project.zip",
            original_file_name="project.zip",
            file_size=100,
            content_type="application/zip",
            storage_path="/tmp/uploads/abc_project.zip",
            checksum="a" * 64,
        )

        assert record["id"] == 5
        assert record["status"] == "PENDING"
        mock_postgres["conn"].commit.assert_called_once()

    def test_insert_sets_pending_status(self, mock_postgres, make_record):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = row(make_record())

        SubmissionRepository().insert(
            file_name="abc_project.zip",
            original_file_name="project.zip",
            file_size=100,
            content_type="application/zip",
            storage_path="/tmp/uploads/abc_project.zip",
            checksum="a" * 64,
        )

        sql, params = mock_cursor.execute.call_args[0]
        assert "INSERT INTO submissions" in sql
        assert "PENDING" in params


class TestRepositoryLookups:
    """Tests for reads."""

    def test_get_returns_none_when_missing(self, mock_postgres):
        mock_postgres["cursor"].fetchone.return_value = None

        assert SubmissionRepository().get(404) is None

    def test_list_by_status_orders_newest_first(self, mock_postgres, make_record):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchall.return_value = [row(make_record(id=2)), row(make_record(id=1))]

        records = SubmissionRepository().list_by_status(SubmissionStatus.PENDING)

        assert [r["id"] for r in records] == [2, 1]
        sql, params = mock_cursor.execute.call_args[0]
        assert "ORDER BY submitted_at DESC" in sql
        assert params == ("PENDING",)

    def test_find_earlier_with_checksum_only_looks_at_lower_ids(self, mock_postgres):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = None

        SubmissionRepository().find_earlier_with_checksum("b" * 64, 9)

        sql, params = mock_cursor.execute.call_args[0]
        assert "id < %s" in sql
        assert params == ("b" * 64, 9)


class TestRepositoryTransition:
    """Tests for compare-and-set status changes."""

    def test_transition_returns_true_when_row_updated(self, mock_postgres):
        mock_postgres["cursor"].rowcount = 1

        moved = SubmissionRepository().transition(
            1, SubmissionStatus.PENDING, SubmissionStatus.VALIDATED
        )

        assert moved is True

    def test_transition_returns_false_on_replay(self, mock_postgres):
        mock_postgres["cursor"].rowcount = 0

        moved = SubmissionRepository().transition(
            1, SubmissionStatus.PENDING, SubmissionStatus.VALIDATED
        )

        assert moved is False

    def test_transition_guards_on_expected_status(self, mock_postgres):
        mock_cursor = mock_postgres["cursor"]

        SubmissionRepository().transition(
            1,
            [SubmissionStatus.STORED, SubmissionStatus.PROCESSING],
            SubmissionStatus.FAILED,
            error_message="boom",
        )

        sql, params = mock_cursor.execute.call_args[0]
        assert "status = ANY(%s)" in sql
        assert params[-1] == ["STORED", "PROCESSING"]
        assert params[0] == "FAILED"
        assert params[1] == "boom"

    def test_transition_stamps_processed_at_for_completed(self, mock_postgres):
        mock_cursor = mock_postgres["cursor"]

        SubmissionRepository().transition(
            1, SubmissionStatus.PROCESSING, SubmissionStatus.COMPLETED
        )

        params = mock_cursor.execute.call_args[0][1]
        assert isinstance(params[2], datetime)

    def test_transition_does_not_stamp_processed_at_midway(self, mock_postgres):
        mock_cursor = mock_postgres["cursor"]

        SubmissionRepository().transition(1, SubmissionStatus.PENDING, SubmissionStatus.VALIDATED)

        params = mock_cursor.execute.call_args[0][1]
        assert params[2] is None


class TestRepositoryAdmin:
    """Tests for admin overrides and deletion."""

    def test_force_status_clears_processed_at_for_non_final(self, mock_postgres, make_record):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = row(make_record(status="REJECTED"))

        record = SubmissionRepository().force_status(1, SubmissionStatus.REJECTED)

        params = mock_cursor.execute.call_args[0][1]
        assert params[0] == "REJECTED"
        assert params[2] is None
        assert record["status"] == "REJECTED"

    def test_force_status_stamps_processed_at_for_failed(self, mock_postgres, make_record):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = row(make_record(status="FAILED"))

        SubmissionRepository().force_status(1, SubmissionStatus.FAILED)

        params = mock_cursor.execute.call_args[0][1]
        assert isinstance(params[2], datetime)

    def test_force_status_failed_records_error_message(self, mock_postgres, make_record):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = row(
            make_record(status="FAILED", error_message=ADMIN_FAILED_MESSAGE)
        )

        SubmissionRepository().force_status(1, SubmissionStatus.FAILED)

        query, params = mock_cursor.execute.call_args[0]
        assert "error_message = %s" in query
        assert params[1] == ADMIN_FAILED_MESSAGE

    def test_force_status_away_from_failed_clears_error_message(self, mock_postgres, make_record):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = row(make_record(status="PENDING"))

        SubmissionRepository().force_status(1, SubmissionStatus.PENDING)

        params = mock_cursor.execute.call_args[0][1]
        assert params[0] == "PENDING"
        assert params[1] is None

    def test_force_status_returns_none_when_missing(self, mock_postgres):
        mock_postgres["cursor"].fetchone.return_value = None

        assert SubmissionRepository().force_status(1, SubmissionStatus.FAILED) is None

    def test_delete_reports_missing_row(self, mock_postgres):
        mock_postgres["cursor"].rowcount = 0

        assert SubmissionRepository().delete(1) is False

    def test_find_stalled_filters_by_age(self, mock_postgres):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchall.return_value = []
        cutoff = datetime(2024, 1, 1, tzinfo=timezone.utc)

        SubmissionRepository().find_stalled([SubmissionStatus.PENDING], cutoff)

        params = mock_cursor.execute.call_args[0][1]
        assert params == (["PENDING"], cutoff)


class TestRepositoryTransitionGuard:
    """Pipeline transitions must follow the status graph."""

    def test_illegal_transition_raises_before_touching_database(self, mock_postgres):
        with pytest.raises(InvalidTransitionError):
            SubmissionRepository().transition(
                1, SubmissionStatus.PENDING, SubmissionStatus.COMPLETED
            )

        mock_postgres["cursor"].execute.assert_not_called()

    def test_pipeline_never_moves_into_rejected(self, mock_postgres):
        with pytest.raises(InvalidTransitionError):
            SubmissionRepository().transition(
                1, SubmissionStatus.PROCESSING, SubmissionStatus.REJECTED
            )
