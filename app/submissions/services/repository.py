"""
SubmissionRepository: persistence for submission records.

This service handles:
- Inserting new submissions in PENDING
- Lookups by id, status, submitter and checksum
- Compare-and-set status transitions used by the pipeline stages
- Admin status overrides and deletion
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from submission_core.domain.exceptions import InvalidTransitionError
from submission_core.domain.status import SubmissionStatus, can_transition, stamps_processed_at
from submission_core.infrastructure.postgres import get_db_connection

COLUMNS = (
    "id",
    "file_name",
    "original_file_name",
    "file_size",
    "content_type",
    "storage_path",
    "description",
    "submitted_by",
    "status",
    "checksum",
    "error_message",
    "submitted_at",
    "processed_at",
    "updated_at",
)
SELECT_COLUMNS = ", ".join(COLUMNS)
ADMIN_FAILED_MESSAGE = "Status set to FAILED by administrator"


def _row_to_dict(row: tuple | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return dict(zip(COLUMNS, row))


def _statuses(expected: SubmissionStatus | Iterable[SubmissionStatus]) -> list[str]:
    if isinstance(expected, SubmissionStatus):
        return [expected.value]
    return [SubmissionStatus(s).value for s in expected]


class SubmissionRepository:
    """
    Repository for the submissions table in PostgreSQL.

    Every method opens its own short transaction; callers never hold a
    connection across file I/O, scanner calls or publishes.

    Usage:
        repo = SubmissionRepository()
        record = repo.insert(file_name="...", original_file_name="a.zip", ...)
        moved = repo.transition(record["id"], SubmissionStatus.PENDING, SubmissionStatus.VALIDATED)
    """

    def insert(
        self,
        file_name: str,
        original_file_name: str,
        file_size: int,
        content_type: str,
        storage_path: str,
        checksum: str,
        description: str | None = None,
        submitted_by: str | None = None,
    ) -> dict[str, Any]:
        """
        Insert a new submission in PENDING.

        Returns:
            dict: The full inserted row, including the assigned id.
        """
        now = datetime.now(timezone.utc)
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT INTO submissions
                (file_name, original_file_name, file_size, content_type, storage_path,
                 description, submitted_by, status, checksum, submitted_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {SELECT_COLUMNS}
                """,
                (
                    file_name,
                    original_file_name,
                    file_size,
                    content_type,
                    storage_path,
                    description,
                    submitted_by,
                    SubmissionStatus.PENDING.value,
                    checksum,
                    now,
                    now,
                ),
            )
            record = _row_to_dict(cursor.fetchone())
            conn.commit()

        logger.info(f"Created submission {record['id']} for {original_file_name}")
        return record

    def get(self, submission_id: int) -> dict[str, Any] | None:
        """Get a submission by id, or None."""
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {SELECT_COLUMNS} FROM submissions WHERE id = %s",
                (submission_id,),
            )
            return _row_to_dict(cursor.fetchone())

    def list_all(self) -> list[dict[str, Any]]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {SELECT_COLUMNS} FROM submissions ORDER BY id")
            return [_row_to_dict(row) for row in cursor.fetchall()]

    def list_by_status(self, status: SubmissionStatus) -> list[dict[str, Any]]:
        """Submissions in a status, newest first."""
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {SELECT_COLUMNS} FROM submissions
                WHERE status = %s
                ORDER BY submitted_at DESC
                """,
                (SubmissionStatus(status).value,),
            )
            return [_row_to_dict(row) for row in cursor.fetchall()]

    def list_by_submitter(self, submitted_by: str) -> list[dict[str, Any]]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {SELECT_COLUMNS} FROM submissions WHERE submitted_by = %s ORDER BY id",
                (submitted_by,),
            )
            return [_row_to_dict(row) for row in cursor.fetchall()]

    def find_earlier_with_checksum(self, checksum: str, submission_id: int) -> dict[str, Any] | None:
        """
        Find the oldest other submission with the same checksum and a lower id.

        Two concurrent uploads of the same bytes may both be inserted; the
        one with the lower id wins and the later one is the duplicate.
        """
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {SELECT_COLUMNS} FROM submissions
                WHERE checksum = %s AND id < %s
                ORDER BY id
                LIMIT 1
                """,
                (checksum, submission_id),
            )
            return _row_to_dict(cursor.fetchone())

    def transition(
        self,
        submission_id: int,
        expected: SubmissionStatus | Iterable[SubmissionStatus],
        target: SubmissionStatus,
        error_message: str | None = None,
    ) -> bool:
        """
        Move a submission to target only if it is currently in one of expected.

        processed_at is stamped when entering COMPLETED or FAILED.

        Returns:
            bool: True if the row was updated, False if it was not in an
            expected status (a replayed or superseded event).

        Raises:
            InvalidTransitionError: If target is not reachable from every
                expected status.
        """
        expected_values = _statuses(expected)
        for current in expected_values:
            if not can_transition(SubmissionStatus(current), target):
                raise InvalidTransitionError(current, target.value)

        now = datetime.now(timezone.utc)
        processed_at = now if stamps_processed_at(target) else None
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE submissions
                SET status = %s,
                    error_message = COALESCE(%s, error_message),
                    processed_at = COALESCE(%s, processed_at),
                    updated_at = %s
                WHERE id = %s AND status = ANY(%s)
                """,
                (
                    target.value,
                    error_message,
                    processed_at,
                    now,
                    submission_id,
                    expected_values,
                ),
            )
            updated = cursor.rowcount == 1
            conn.commit()

        if updated:
            logger.debug(f"[{submission_id}] Status -> {target.value}")
        return updated

    def force_status(self, submission_id: int, status: SubmissionStatus) -> dict[str, Any] | None:
        """
        Admin override of the status, bypassing the pipeline graph.

        processed_at is set to now for COMPLETED/FAILED and cleared otherwise.
        FAILED gets ADMIN_FAILED_MESSAGE as error_message; any other status
        clears it.

        Returns:
            dict: The updated row, or None if the id does not exist.
        """
        now = datetime.now(timezone.utc)
        processed_at = now if stamps_processed_at(status) else None
        error_message = ADMIN_FAILED_MESSAGE if status == SubmissionStatus.FAILED else None
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                UPDATE submissions
                SET status = %s, error_message = %s, processed_at = %s, updated_at = %s
                WHERE id = %s
                RETURNING {SELECT_COLUMNS}
                """,
                (status.value, error_message, processed_at, now, submission_id),
            )
            record = _row_to_dict(cursor.fetchone())
            conn.commit()
        return record

    def touch(self, submission_id: int, status: SubmissionStatus) -> bool:
        """Bump updated_at if the row is still in status."""
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE submissions SET updated_at = %s WHERE id = %s AND status = %s",
                (datetime.now(timezone.utc), submission_id, status.value),
            )
            updated = cursor.rowcount == 1
            conn.commit()
        return updated

    def find_stalled(
        self, statuses: Iterable[SubmissionStatus], updated_before: datetime
    ) -> list[dict[str, Any]]:
        """Non-terminal submissions whose status has not changed since updated_before."""
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {SELECT_COLUMNS} FROM submissions
                WHERE status = ANY(%s) AND updated_at < %s
                ORDER BY id
                """,
                (_statuses(statuses), updated_before),
            )
            return [_row_to_dict(row) for row in cursor.fetchall()]

    def delete(self, submission_id: int) -> bool:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM submissions WHERE id = %s", (submission_id,))
            deleted = cursor.rowcount == 1
            conn.commit()

        if deleted:
            logger.info(f"Deleted submission row {submission_id}")
        return deleted
