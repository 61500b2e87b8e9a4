"""Tests for the GitHub Actions platform surface."""

import io
import tempfile
from pathlib import Path

import pytest
from fakes import console_text
from rich.console import Console

from appaudix_action.reporting.github_platform import GitHubActionsPlatform


def _platform(environ: dict[str, str]) -> GitHubActionsPlatform:
    console = Console(file=io.StringIO(), soft_wrap=True, highlight=False, width=120)
    return GitHubActionsPlatform(environ=environ, console=console)


class TestOutputs:
    """Tests for set_output."""

    def test_writes_to_output_file(
        self, platform: GitHubActionsPlatform, runner_env: dict[str, str]
    ) -> None:
        platform.set_output("scan-id", "scan-42")
        platform.set_output("critical-count", 3)

        content = Path(runner_env["GITHUB_OUTPUT"]).read_text(encoding="utf-8")
        assert content == "scan-id=scan-42\ncritical-count=3\n"
        assert platform.outputs == {"scan-id": "scan-42", "critical-count": "3"}

    def test_multiline_value_uses_delimiter(
        self, platform: GitHubActionsPlatform, runner_env: dict[str, str]
    ) -> None:
        platform.set_output("summary", "line one\nline two")

        lines = Path(runner_env["GITHUB_OUTPUT"]).read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("summary<<ghadelimiter_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:] == ["line one", "line two", delimiter]

    def test_without_runner_prints_value(self) -> None:
        platform = _platform({})

        platform.set_output("status", "queued")

        assert "status=queued" in console_text(platform)
        assert platform.outputs["status"] == "queued"


class TestLogCommands:
    """Tests for workflow commands."""

    def test_info_is_plain(self, platform: GitHubActionsPlatform) -> None:
        platform.info("   [30%] Decompiling")
        assert console_text(platform) == "   [30%] Decompiling\n"

    def test_warning_escapes_data(self, platform: GitHubActionsPlatform) -> None:
        platform.warning("Failed: 100% broken\nsecond line")
        assert console_text(platform) == "::warning::Failed: 100%25 broken%0Asecond line\n"

    def test_group_closes_on_error(self, platform: GitHubActionsPlatform) -> None:
        with pytest.raises(RuntimeError):
            with platform.group("Uploading app for scanning..."):
                platform.info("inside")
                raise RuntimeError("boom")

        assert console_text(platform).splitlines() == [
            "::group::Uploading app for scanning...",
            "inside",
            "::endgroup::",
        ]

    def test_set_failed(self, platform: GitHubActionsPlatform) -> None:
        platform.set_failed("Action failed: File not found: app.apk")

        assert platform.failed
        assert platform.failure_message == "Action failed: File not found: app.apk"
        assert "::error::Action failed: File not found: app.apk" in console_text(platform)


class TestRunContext:
    """Tests for run context access."""

    def test_context(self, platform: GitHubActionsPlatform, runner_env: dict[str, str]) -> None:
        context = platform.context

        assert context.owner == "octo-org"
        assert context.repo == "mobile-app"
        assert context.sha == runner_env["GITHUB_SHA"]
        assert context.ref == "refs/heads/main"
        assert context.api_url == "https://api.github.test"
        assert context.token == "ghs_test"
        assert context.temp_dir == Path(runner_env["RUNNER_TEMP"])

    def test_context_defaults(self) -> None:
        context = _platform({}).context

        assert context.owner is None
        assert context.repo is None
        assert context.token is None
        assert context.api_url == "https://api.github.com"
        assert context.temp_dir == Path(tempfile.gettempdir())
