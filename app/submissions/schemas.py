"""
Pydantic schemas for the submissions API.

Responses are serialized with camelCase keys.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from submission_core.domain.status import SubmissionStatus


class SubmissionResponse(BaseModel):
    """Public view of a submission row."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    file_name: str
    original_file_name: str
    file_size: int
    content_type: str | None = None
    description: str | None = None
    submitted_by: str | None = None
    status: SubmissionStatus
    submitted_at: datetime
    processed_at: datetime | None = None
    checksum: str | None = None
    error_message: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "SubmissionResponse":
        return cls(
            id=record["id"],
            file_name=record["file_name"],
            original_file_name=record["original_file_name"],
            file_size=record["file_size"],
            content_type=record.get("content_type"),
            description=record.get("description"),
            submitted_by=record.get("submitted_by"),
            status=record["status"],
            submitted_at=record["submitted_at"],
            processed_at=record.get("processed_at"),
            checksum=record.get("checksum"),
            error_message=record.get("error_message"),
        )

