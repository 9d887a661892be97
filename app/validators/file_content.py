"""
File content validator.

Walks the archive directory without extracting anything and rejects
oversized entry counts, unsafe entry paths, empty archives and
suspicious compression ratios (decompression bombs).
"""

from __future__ import annotations

import zipfile

from loguru import logger

from app.validators.base import BaseValidator, ValidationResult
from submission_core.domain.events import SubmissionEvent


def is_unsafe_entry(name: str) -> bool:
    return ".." in name or name.startswith("/") or "\\" in name


class FileContentValidator(BaseValidator):
    order = 15.0

    def __init__(self, max_entries: int, max_ratio: int):
        self.max_entries = max_entries
        self.max_ratio = max_ratio

    def validate(self, event: SubmissionEvent) -> ValidationResult:
        sid = event.submission_id
        try:
            with zipfile.ZipFile(event.storage_path) as archive:
                entries = archive.infolist()
        except zipfile.BadZipFile as e:
            logger.error(f"[{sid}] Invalid ZIP file: {e}")
            return self.failure(f"Invalid ZIP file format: {e}")
        except OSError as e:
            logger.error(f"[{sid}] Error reading file: {e}")
            return self.failure(f"Error reading file: {e}")

        uncompressed_total = 0
        for count, entry in enumerate(entries, start=1):
            if count > self.max_entries:
                logger.warning(f"[{sid}] Too many ZIP entries (> {self.max_entries})")
                return self.failure(
                    f"ZIP file contains too many entries (maximum: {self.max_entries})"
                )

            if is_unsafe_entry(entry.filename):
                logger.warning(f"[{sid}] Suspicious entry name: {entry.filename!r}")
                return self.failure(f"ZIP contains invalid entry path: {entry.filename}")

            if not entry.is_dir():
                uncompressed_total += entry.file_size

        if not entries:
            return self.failure("ZIP file is empty")

        compressed_total = max(event.file_size, 1)
        ratio = uncompressed_total // compressed_total
        if ratio > self.max_ratio:
            logger.warning(f"[{sid}] Suspicious compression ratio: {ratio}")
            return self.failure(
                f"Suspicious compression ratio detected (possible zip bomb): "
                f"{ratio} exceeds {self.max_ratio}"
            )

        logger.debug(f"[{sid}] Content OK: {len(entries)} entries, {uncompressed_total} bytes")
        return self.success()
