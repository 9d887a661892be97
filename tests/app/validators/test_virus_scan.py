"""Unit tests for VirusScanValidator."""

from unittest.mock import MagicMock

from app.validators.virus_scan import VirusScanValidator
from submission_core.domain.exceptions import ScannerUnavailableError
from submission_core.infrastructure.clamav import ScanResult


class TestVirusScanValidator:
    def test_disabled_scanner_passes_without_scanning(self, make_event):
        scanner = MagicMock()

        result = VirusScanValidator(scanner, enabled=False).validate(make_event())

        assert result.valid
        scanner.scan_file.assert_not_called()

    def test_clean_file_passes(self, make_event):
        scanner = MagicMock()
        scanner.scan_file.return_value = ScanResult(clean=True, raw="stream: OK")

        assert VirusScanValidator(scanner).validate(make_event()).valid

    def test_infected_file_fails_with_virus_names(self, make_event):
        scanner = MagicMock()
        scanner.scan_file.return_value = ScanResult(clean=False, viruses=["Eicar-Test-Signature"])

        result = VirusScanValidator(scanner).validate(make_event())

        assert not result.valid
        assert result.error_message == "Virus detected: Eicar-Test-Signature"

    def test_multiple_virus_names_are_comma_separated(self, make_event):
        scanner = MagicMock()
        scanner.scan_file.return_value = ScanResult(clean=False, viruses=["Eicar-Test-Signature", "Win.Trojan.Agent"])

        result = VirusScanValidator(scanner).validate(make_event())

        assert result.error_message == "Virus detected: Eicar-Test-Signature, Win.Trojan.Agent"

    def test_scanner_offline_fails_closed(self, make_event):
        scanner = MagicMock()
        scanner.scan_file.side_effect = ScannerUnavailableError("Cannot connect to clamd at localhost:3310")

        result = VirusScanValidator(scanner).validate(make_event())

        assert not result.valid
        assert result.validator_name == "VirusScanValidator"
        assert result.error_message == "Virus scan failed: Cannot connect to clamd at localhost:3310"

    def test_unexpected_error_fails_closed(self, make_event):
        scanner = MagicMock()
        scanner.scan_file.side_effect = FileNotFoundError("File not found: x")

        result = VirusScanValidator(scanner).validate(make_event())

        assert result.error_message == "Virus scan failed: File not found: x"
