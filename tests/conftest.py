"""Pytest configuration and fixtures."""

import io
from pathlib import Path

import pytest
from fakes import FakeClock
from pydantic import SecretStr
from rich.console import Console

from appaudix_action.models.model_config import ActionConfig
from appaudix_action.models.model_scan import ScanResults
from appaudix_action.reporting.github_platform import GitHubActionsPlatform


@pytest.fixture
def sample_binary(tmp_path: Path) -> Path:
    """Create a small fake APK."""
    path = tmp_path / "app-release.apk"
    path.write_bytes(b"PK\x03\x04" + b"\x00" * 2048)
    return path


@pytest.fixture
def sample_results() -> ScanResults:
    return ScanResults(
        compliance_score=87,
        risk_level="MEDIUM",
        critical_issues=0,
        high_issues=2,
        medium_issues=5,
        low_issues=1,
    )


@pytest.fixture
def sample_config(sample_binary: Path) -> ActionConfig:
    return ActionConfig(
        api_key=SecretStr("test-key"),
        file_path=sample_binary,
        frameworks=["pci_dss", "owasp_masvs"],
        fail_on="critical",
        upload_sarif=False,
        wait_for_completion=True,
        timeout_minutes=30,
        api_url="https://api.example.test",
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def runner_env(tmp_path: Path) -> dict[str, str]:
    """Environment of a GitHub Actions runner."""
    output_file = tmp_path / "github_output"
    output_file.touch()
    runner_temp = tmp_path / "runner_temp"
    runner_temp.mkdir()
    return {
        "GITHUB_OUTPUT": str(output_file),
        "GITHUB_REPOSITORY": "octo-org/mobile-app",
        "GITHUB_SHA": "0123456789abcdef0123456789abcdef01234567",
        "GITHUB_REF": "refs/heads/main",
        "GITHUB_API_URL": "https://api.github.test",
        "GITHUB_TOKEN": "ghs_test",
        "RUNNER_TEMP": str(runner_temp),
    }


@pytest.fixture
def platform(runner_env: dict[str, str]) -> GitHubActionsPlatform:
    console = Console(file=io.StringIO(), soft_wrap=True, highlight=False, width=120)
    return GitHubActionsPlatform(environ=runner_env, console=console)
