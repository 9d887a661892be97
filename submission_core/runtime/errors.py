"""
Error model shared by the API and the pipeline workers.

Every domain exception is a ServiceError carrying a machine-readable code,
a message that is safe to store on a submission or return to a client, and
a retry classification. Nothing in the application retries in-process:
retryable errors are left to broker redelivery and reconciliation, terminal
errors fail the submission.
"""

from __future__ import annotations

import uuid
from typing import Any


class ServiceError(Exception):
    """Base error with a code, a safe message and a retry classification.

    Attributes:
        code: Machine-readable error code (see ErrorCode).
        message_safe: Text recorded as error_message or returned to clients.
        cause: The underlying exception, if any.
        debug_id: Short id for correlating the client response with logs.
    """

    retryable: bool = False

    def __init__(
        self,
        code: str,
        message_safe: str,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.cause = cause
        self.debug_id = debug_id or uuid.uuid4().hex[:8]

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Client-facing error body."""
        return {"code": self.code, "message": self.message_safe, "debug_id": self.debug_id}


class RetryableError(ServiceError):
    """Transient infrastructure failure: disk, database, scanner transport."""

    retryable = True


class TerminalError(ServiceError):
    """Rejected input, missing submission or integrity violation."""

    retryable = False


class ErrorCode:
    """Error codes used by the submission domain."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    INTEGRITY_VIOLATION = "INTEGRITY_VIOLATION"
    ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    SCANNER_UNAVAILABLE = "SCANNER_UNAVAILABLE"
