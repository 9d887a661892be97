"""
Service runtime layer for submission-disk.

This package provides the shared error model:
- ServiceError: Standardized errors with retry semantics
- RetryableError / TerminalError: Retry classification
"""

from .errors import ErrorCode, RetryableError, ServiceError, TerminalError

__all__ = [
    "ErrorCode",
    "ServiceError",
    "RetryableError",
    "TerminalError",
]
