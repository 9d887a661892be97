"""
ClamAV (clamd) client for submission-disk.

Speaks the clamd TCP protocol directly: files are streamed with the
INSTREAM command in length-prefixed chunks and the daemon answers with a
single null-terminated line such as ``stream: OK`` or
``stream: Eicar-Signature FOUND``.
"""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from submission_core.config import settings
from submission_core.domain.exceptions import ScannerUnavailableError

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ScanResult:
    """Outcome of a single clamd scan."""

    clean: bool
    viruses: list[str] = field(default_factory=list)
    raw: str = ""


class ClamAVClient:
    """
    Minimal clamd client.

    Usage:
        client = ClamAVClient(host="localhost", port=3310)
        result = client.scan_file("uploads/abc_submission.zip")
    """

    def __init__(self, host: str, port: int, timeout: float = 30.0):
        self.host = host
        self.port = port
        self.timeout = timeout

    def _connect(self) -> socket.socket:
        try:
            return socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            raise ScannerUnavailableError(
                f"Cannot connect to clamd at {self.host}:{self.port}: {e}", cause=e
            ) from e

    @staticmethod
    def _recv_line(sock: socket.socket) -> str:
        buffer = b""
        while not buffer.endswith(b"\0"):
            chunk = sock.recv(4096)
            if not chunk:
                break
            buffer += chunk
        return buffer.rstrip(b"\0").decode("utf-8", errors="replace").strip()

    def ping(self) -> bool:
        """Return True if clamd answers PONG."""
        try:
            with self._connect() as sock:
                sock.sendall(b"zPING\0")
                return self._recv_line(sock) == "PONG"
        except (ScannerUnavailableError, OSError) as e:
            logger.error(f"Failed to ping clamd: {e}")
            return False

    def scan_file(self, path: str | Path) -> ScanResult:
        """
        Stream a file to clamd and parse the verdict.

        Raises:
            FileNotFoundError: If the file does not exist.
            ScannerUnavailableError: On transport errors or an ERROR verdict.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            with self._connect() as sock, path.open("rb") as fh:
                sock.sendall(b"zINSTREAM\0")
                while chunk := fh.read(CHUNK_SIZE):
                    sock.sendall(struct.pack("!L", len(chunk)) + chunk)
                sock.sendall(struct.pack("!L", 0))
                reply = self._recv_line(sock)
        except OSError as e:
            raise ScannerUnavailableError(f"clamd transport error: {e}", cause=e) from e

        return self._parse_reply(reply)

    @staticmethod
    def _parse_reply(reply: str) -> ScanResult:
        # "stream: OK" | "stream: <name> FOUND" | "<message> ERROR"
        if not reply:
            raise ScannerUnavailableError("clamd closed the connection without a verdict")

        _, _, verdict = reply.partition(": ")
        verdict = verdict or reply
        if verdict == "OK":
            return ScanResult(clean=True, raw=reply)
        if verdict.endswith(" FOUND"):
            names = [name.strip() for name in verdict[: -len(" FOUND")].split(",") if name.strip()]
            return ScanResult(clean=False, viruses=names, raw=reply)
        raise ScannerUnavailableError(f"clamd returned an error: {reply}")


def get_clamav_client() -> ClamAVClient:
    """Build a client from settings."""
    return ClamAVClient(
        host=settings.VIRUS_SCAN_HOST,
        port=settings.VIRUS_SCAN_PORT,
        timeout=settings.VIRUS_SCAN_TIMEOUT,
    )
