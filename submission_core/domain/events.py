"""
Pipeline event envelope.

A SubmissionEvent carries the full snapshot a stage handler needs, so that the
hot path does not have to re-read the database to learn file locations or
metadata. The persisted row stays authoritative for status.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from submission_core.domain.status import SubmissionStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionEvent(BaseModel):
    """Snapshot of a submission travelling between pipeline stages."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    submission_id: int
    file_name: str
    original_file_name: str
    file_size: int
    content_type: str | None = None
    storage_path: str
    description: str | None = None
    submitted_by: str | None = None
    checksum: str
    status: SubmissionStatus
    timestamp: datetime = Field(default_factory=utcnow)
    error_message: str | None = None

    # Pipeline stage tracking (observability only)
    current_stage: str | None = None
    next_stage: str | None = None

    @property
    def key(self) -> str:
        """Partition key: all events of one submission share it."""
        return str(self.submission_id)

    def advance(
        self,
        status: SubmissionStatus,
        current_stage: str,
        next_stage: str | None,
        error_message: str | None = None,
    ) -> "SubmissionEvent":
        """Return the outbound snapshot for the next hop."""
        return self.model_copy(
            update={
                "status": status,
                "current_stage": current_stage,
                "next_stage": next_stage,
                "error_message": error_message,
                "timestamp": utcnow(),
            }
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe dict with camelCase keys and ISO-8601 timestamps."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SubmissionEvent":
        return cls.model_validate(payload)

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        current_stage: str | None = None,
        next_stage: str | None = None,
    ) -> "SubmissionEvent":
        """Build a snapshot from a submissions row dict."""
        return cls(
            submission_id=record["id"],
            file_name=record["file_name"],
            original_file_name=record["original_file_name"],
            file_size=record["file_size"],
            content_type=record.get("content_type"),
            storage_path=record["storage_path"],
            description=record.get("description"),
            submitted_by=record.get("submitted_by"),
            checksum=record["checksum"],
            status=record["status"],
            error_message=record.get("error_message"),
            current_stage=current_stage,
            next_stage=next_stage,
        )
