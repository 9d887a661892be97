"""
Local filesystem storage for submitted archives.

Archives are written flat into a single base directory as
``{random_token}_{base_name}``, where base_name is the last path component
of the client name, stripped of NUL bytes and shortened to fit the
filesystem name limit. The returned storage path is the opaque handle
recorded on the submission row.
"""

from __future__ import annotations

import hashlib
import os
import shutil
import uuid
import zipfile
from pathlib import Path
from typing import BinaryIO

from loguru import logger

from submission_core.config import settings
from submission_core.domain.exceptions import InvalidSubmissionError, StorageFailureError

CHUNK_SIZE = 8192
MAX_NAME_BYTES = 255
TOKEN_LENGTH = 32


def disk_suffix(original_filename: str) -> str:
    """
    On-disk suffix for a client filename.

    Keeps only the last path component, drops NUL bytes and truncates the
    stem so that `{token}_{suffix}` fits in MAX_NAME_BYTES.
    """
    name = os.path.basename(original_filename.replace("\x00", "").replace("\\", "/"))
    if not name or name in (".", ".."):
        name = "upload.zip"

    budget = MAX_NAME_BYTES - TOKEN_LENGTH - 1
    if len(name.encode("utf-8")) <= budget:
        return name

    stem, ext = os.path.splitext(name)
    if len(ext.encode("utf-8")) >= budget:
        stem, ext = name, ""
    keep = budget - len(ext.encode("utf-8"))
    return stem.encode("utf-8")[:keep].decode("utf-8", "ignore") + ext


class FileStorageService:
    """
    File-system based storage for submission archives.

    Usage:
        storage = FileStorageService(base_path="uploads")
        storage.validate_zip(fileobj, "project.zip")
        checksum = storage.compute_checksum(fileobj)
        stored_name, path, size = storage.store(fileobj, "project.zip")
    """

    def __init__(self, base_path: str | None = None):
        """
        Initialize local storage.

        Args:
            base_path: Directory for all stored archives (defaults to
                SUBMISSION_STORAGE_PATH).
        """
        self.base_path = Path(base_path or settings.SUBMISSION_STORAGE_PATH)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"FileStorageService initialized at {self.base_path}")

    def validate_zip(self, fileobj: BinaryIO, filename: str | None) -> None:
        """
        Reject anything that is not a ZIP archive with at least one entry.

        Raises:
            InvalidSubmissionError: If the name or the content is not a ZIP.
        """
        if not filename or not filename.lower().endswith(".zip"):
            raise InvalidSubmissionError("File must be a ZIP archive")

        fileobj.seek(0, 2)
        if fileobj.tell() == 0:
            raise InvalidSubmissionError("File is empty")
        fileobj.seek(0)

        try:
            with zipfile.ZipFile(fileobj) as archive:
                if not archive.infolist():
                    raise InvalidSubmissionError("ZIP file is empty or corrupted")
        except zipfile.BadZipFile as e:
            raise InvalidSubmissionError("Invalid ZIP file format", cause=e) from e
        finally:
            fileobj.seek(0)

    @staticmethod
    def compute_checksum(fileobj: BinaryIO) -> str:
        """
        Compute the SHA-256 of a stream without loading it into memory.

        Returns:
            str: Lowercase hex digest. The stream is rewound afterwards.
        """
        digest = hashlib.sha256()
        fileobj.seek(0)
        for chunk in iter(lambda: fileobj.read(CHUNK_SIZE), b""):
            digest.update(chunk)
        fileobj.seek(0)
        return digest.hexdigest()

    def checksum_file(self, storage_path: str) -> str:
        """SHA-256 of a stored archive."""
        with open(storage_path, "rb") as fh:
            return self.compute_checksum(fh)

    def store(self, fileobj: BinaryIO, original_filename: str) -> tuple[str, str, int]:
        """
        Copy an upload into the storage directory.

        Args:
            fileobj: Readable binary stream positioned anywhere.
            original_filename: Client-provided name; its base name becomes the suffix.

        Returns:
            tuple: (stored_filename, storage_path, bytes_written).

        Raises:
            StorageFailureError: If the bytes cannot be written.
        """
        stored_filename = f"{uuid.uuid4().hex}_{disk_suffix(original_filename)}"
        target = self.base_path / stored_filename

        try:
            fileobj.seek(0)
            with open(target, "wb") as out:
                shutil.copyfileobj(fileobj, out, CHUNK_SIZE)
            size = target.stat().st_size
        except OSError as e:
            logger.error(f"Failed to store {original_filename}: {e}")
            raise StorageFailureError("Failed to store file", cause=e) from e

        storage_path = str(target)
        logger.info(f"Stored {original_filename} as {storage_path} ({size} bytes)")
        return stored_filename, storage_path, size

    @staticmethod
    def exists(storage_path: str) -> bool:
        return Path(storage_path).is_file()

    @staticmethod
    def size(storage_path: str) -> int:
        return Path(storage_path).stat().st_size

    def delete(self, storage_path: str) -> None:
        """
        Delete a stored archive. A missing file is not an error.

        Raises:
            StorageFailureError: If the file exists but cannot be removed.
        """
        try:
            Path(storage_path).unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete {storage_path}: {e}")
            raise StorageFailureError("Failed to delete submission file", cause=e) from e
        logger.info(f"Deleted {storage_path}")
