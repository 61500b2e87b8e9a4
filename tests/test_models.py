"""Tests for the scan data models."""

from pathlib import Path

import pytest
from pydantic import SecretStr, ValidationError

from appaudix_action.models import (
    FailureThreshold,
    ScanHandle,
    ScanRequest,
    ScanResults,
    ScanStatus,
    ScanStatusSnapshot,
)


class TestScanStatus:
    """Tests for ScanStatus."""

    @pytest.mark.parametrize(
        "status,terminal",
        [
            (ScanStatus.QUEUED, False),
            (ScanStatus.RUNNING, False),
            (ScanStatus.COMPLETED, True),
            (ScanStatus.ERROR, True),
            (ScanStatus.CANCELLED, True),
        ],
    )
    def test_is_terminal(self, status: ScanStatus, terminal: bool) -> None:
        assert status.is_terminal is terminal


class TestFailureThreshold:
    """Tests for FailureThreshold."""

    def test_rank_order(self) -> None:
        ranks = [t.rank for t in FailureThreshold]
        assert ranks == [0, 1, 2, 3, 4]
        assert FailureThreshold.CRITICAL.rank < FailureThreshold.LOW.rank


class TestScanHandle:
    """Tests for ScanHandle."""

    def test_empty_scan_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScanHandle(scan_id="")

    def test_frozen(self) -> None:
        handle = ScanHandle(scan_id="scan-1")
        with pytest.raises(ValidationError):
            handle.scan_id = "scan-2"


class TestScanRequest:
    """Tests for ScanRequest."""

    def test_frozen_and_secret(self, tmp_path: Path) -> None:
        request = ScanRequest(
            binary_path=tmp_path / "app.apk",
            frameworks=["pci_dss", "pci_dss"],
            api_key=SecretStr("top-secret"),
            api_base_url="https://api.appaudix.com",
        )

        assert request.frameworks == ["pci_dss", "pci_dss"]
        assert "top-secret" not in repr(request)
        with pytest.raises(ValidationError):
            request.api_base_url = "https://elsewhere.test"


class TestScanResults:
    """Tests for ScanResults."""

    def test_defaults(self) -> None:
        results = ScanResults()
        assert results.compliance_score == 0
        assert results.risk_level == "UNKNOWN"
        assert results.critical_issues == results.low_issues == 0

    def test_none_values_default(self) -> None:
        results = ScanResults.model_validate(
            {"compliance_score": None, "risk_level": None, "critical_issues": None}
        )
        assert results.compliance_score == 0
        assert results.risk_level == "UNKNOWN"
        assert results.critical_issues == 0

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScanResults(high_issues=-1)


class TestScanStatusSnapshot:
    """Tests for ScanStatusSnapshot."""

    def test_parse_running(self) -> None:
        snapshot = ScanStatusSnapshot.model_validate(
            {"status": "running", "progress": 45, "message": "Analyzing"}
        )
        assert snapshot.status == ScanStatus.RUNNING
        assert not snapshot.is_terminal
        assert snapshot.display_message == "Analyzing"
        assert snapshot.results is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (45.5, 46),
            (12.2, 12),
            ("30", 30),
            (-5, 0),
            (140, 100),
            (None, 0),
        ],
    )
    def test_progress_normalized(self, raw: object, expected: int) -> None:
        snapshot = ScanStatusSnapshot.model_validate({"status": "running", "progress": raw})
        assert snapshot.progress == expected

    def test_non_numeric_progress_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScanStatusSnapshot.model_validate({"status": "running", "progress": "halfway"})

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScanStatusSnapshot.model_validate({"status": "paused"})
