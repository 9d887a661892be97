"""Shared fixtures for the submission-disk test suite."""

import io
import zipfile
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from submission_core.domain.events import SubmissionEvent
from submission_core.domain.status import SubmissionStatus

CHECKSUM = "a" * 64


def build_zip(entries: dict[str, bytes] | None = None, compression=zipfile.ZIP_DEFLATED) -> bytes:
    """Build an in-memory ZIP archive from {name: content}."""
    if entries is None:
        entries = {"readme.txt": b"hello submission"}
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_zip():
    return build_zip


@pytest.fixture
def mock_postgres():
    """Patch the repository's connection factory with a MagicMock connection."""
    mock_cursor = MagicMock()
    mock_cursor.rowcount = 1
    mock_conn = MagicMock()
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = False
    mock_conn.cursor.return_value = mock_cursor

    with patch(
        "app.submissions.services.repository.get_db_connection", return_value=mock_conn
    ):
        yield {"conn": mock_conn, "cursor": mock_cursor}


@pytest.fixture
def make_record():
    """Factory for submission row dicts as returned by the repository."""

    def _make(**overrides):
        record = {
            "id": 1,
            "file_name": "0f" * 16 + "_project.zip",
            "original_file_name": "project.zip",
            "file_size": 100,
            "content_type": "application/zip",
            "storage_path": "/tmp/uploads/project.zip",
            "description": None,
            "submitted_by": "alice",
            "status": SubmissionStatus.PENDING.value,
            "checksum": CHECKSUM,
            "error_message": None,
            "submitted_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "processed_at": None,
            "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def make_event(make_record):
    """Factory for SubmissionEvents built from a record."""

    def _make(**overrides):
        return SubmissionEvent.from_record(make_record(**overrides))

    return _make


@pytest.fixture
def stored_zip(tmp_path, make_zip):
    """Write a ZIP to disk and return (path, bytes)."""

    def _store(entries: dict[str, bytes] | None = None, name: str = "project.zip"):
        data = make_zip(entries)
        path = tmp_path / name
        path.write_bytes(data)
        return str(path), data

    return _store
