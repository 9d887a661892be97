"""Filename validator: rejects unsafe or non-ZIP original filenames."""

from __future__ import annotations

import re

from loguru import logger

from app.validators.base import BaseValidator, ValidationResult
from submission_core.domain.events import SubmissionEvent

MAX_FILENAME_LENGTH = 255

PATH_TRAVERSAL_PATTERN = re.compile(r"[/\\]\.\.[/\\]")
INVALID_CHARS_PATTERN = re.compile(r'[<>:"|?*\x00-\x1F]')


class FilenameValidator(BaseValidator):
    order = 5.0

    def validate(self, event: SubmissionEvent) -> ValidationResult:
        filename = event.original_file_name

        if not filename or not filename.strip():
            return self.failure("Filename cannot be empty")

        if len(filename) > MAX_FILENAME_LENGTH:
            return self.failure(f"Filename too long (max {MAX_FILENAME_LENGTH} characters)")

        if "\0" in filename:
            logger.warning(f"[{event.submission_id}] Null byte in filename")
            return self.failure("Invalid filename: contains null bytes")

        if PATH_TRAVERSAL_PATTERN.search(filename):
            logger.warning(f"[{event.submission_id}] Path traversal in filename: {filename!r}")
            return self.failure("Invalid filename: path traversal attempt detected")

        if INVALID_CHARS_PATTERN.search(filename):
            logger.warning(f"[{event.submission_id}] Invalid characters in filename: {filename!r}")
            return self.failure("Invalid characters in filename")

        if not filename.lower().endswith(".zip"):
            return self.failure("Invalid file extension. Only .zip files are allowed")

        return self.success()
