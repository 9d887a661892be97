"""
Standard exceptions for submission-disk.

This module defines the hierarchy of exceptions used across the platform.
Client-facing errors are terminal; infrastructure errors are retryable and
rely on broker redelivery rather than in-process retries.
"""

from submission_core.runtime.errors import ErrorCode, RetryableError, TerminalError


class InvalidSubmissionError(TerminalError):
    """Upload rejected at ingress (not a ZIP, empty archive, bad input)."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(code=ErrorCode.INVALID_INPUT, message_safe=message, cause=cause)


class SubmissionNotFoundError(TerminalError):
    """No submission row exists for the given id."""

    def __init__(self, submission_id: int):
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message_safe=f"Submission not found: {submission_id}",
        )
        self.submission_id = submission_id


class IntegrityViolationError(TerminalError):
    """Stored bytes no longer match what was recorded at ingress."""

    def __init__(self, message: str):
        super().__init__(code=ErrorCode.INTEGRITY_VIOLATION, message_safe=message)


class StorageFailureError(RetryableError):
    """Error while writing, reading or deleting archive bytes."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(code=ErrorCode.STORAGE_FAILURE, message_safe=message, cause=cause)


class ScannerUnavailableError(RetryableError):
    """The virus scanner could not be reached or returned garbage."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(code=ErrorCode.SCANNER_UNAVAILABLE, message_safe=message, cause=cause)


class InvalidTransitionError(TerminalError):
    """A status change that the submission state machine does not allow."""

    def __init__(self, current: str, target: str):
        super().__init__(
            code=ErrorCode.ILLEGAL_TRANSITION,
            message_safe=f"Illegal status transition {current} -> {target}",
        )
        self.current = current
        self.target = target
