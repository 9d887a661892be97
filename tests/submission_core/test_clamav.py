"""Unit tests for the clamd client."""

import struct
from unittest.mock import MagicMock, patch

import pytest

from submission_core.domain.exceptions import ScannerUnavailableError
from submission_core.infrastructure.clamav import ClamAVClient


def fake_socket(reply: bytes):
    sock = MagicMock()
    sock.__enter__.return_value = sock
    sock.__exit__.return_value = False
    sock.recv.side_effect = [reply, b""]
    return sock


class TestParseReply:
    """Verdict parsing."""

    def test_ok_is_clean(self):
        result = ClamAVClient._parse_reply("stream: OK")

        assert result.clean is True
        assert result.viruses == []

    def test_found_lists_virus_names(self):
        result = ClamAVClient._parse_reply("stream: Win.Test.EICAR_HDB-1 FOUND")

        assert result.clean is False
        assert result.viruses == ["Win.Test.EICAR_HDB-1"]

    def test_error_reply_raises(self):
        with pytest.raises(ScannerUnavailableError):
            ClamAVClient._parse_reply("INSTREAM size limit exceeded. ERROR")

    def test_empty_reply_raises(self):
        with pytest.raises(ScannerUnavailableError):
            ClamAVClient._parse_reply("")


class TestScanFile:
    """INSTREAM exchange."""

    def test_streams_file_in_chunks(self, tmp_path):
        path = tmp_path / "a.zip"
        path.write_bytes(b"PK\x03\x04data")
        sock = fake_socket(b"stream: OK\0")

        with patch("socket.create_connection", return_value=sock):
            result = ClamAVClient("localhost", 3310).scan_file(path)

        assert result.clean is True
        sent = [c.args[0] for c in sock.sendall.call_args_list]
        assert sent[0] == b"zINSTREAM\0"
        assert sent[1] == struct.pack("!L", 8) + b"PK\x03\x04data"
        assert sent[-1] == struct.pack("!L", 0)

    def test_connection_refused_raises_scanner_unavailable(self, tmp_path):
        path = tmp_path / "a.zip"
        path.write_bytes(b"x")

        with patch("socket.create_connection", side_effect=ConnectionRefusedError("refused")):
            with pytest.raises(ScannerUnavailableError) as exc_info:
                ClamAVClient("localhost", 3310).scan_file(path)

        assert "localhost:3310" in exc_info.value.message_safe

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ClamAVClient("localhost", 3310).scan_file(tmp_path / "missing.zip")

    def test_ping(self):
        sock = fake_socket(b"PONG\0")

        with patch("socket.create_connection", return_value=sock):
            assert ClamAVClient("localhost", 3310).ping() is True
