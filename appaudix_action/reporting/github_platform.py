"""GitHub Actions runner surface: inputs, outputs, log groups and annotations.

Workflow commands are written with Console.out so that rich never wraps or
interprets them as markup. Outputs go to the $GITHUB_OUTPUT file when the
runner provides one.
"""

import logging
import os
import tempfile
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from appaudix_action.consts import DEFAULT_GITHUB_API_URL

logger = logging.getLogger(__name__)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


@dataclass(frozen=True)
class RunContext:
    """Repository and commit the workflow run is attached to."""

    repository: str | None
    sha: str | None
    ref: str | None
    api_url: str
    token: str | None
    temp_dir: Path

    @property
    def owner(self) -> str | None:
        if not self.repository or "/" not in self.repository:
            return None
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str | None:
        if not self.repository or "/" not in self.repository:
            return None
        return self.repository.split("/", 1)[1]


class GitHubActionsPlatform:
    """Host CI platform backed by the GitHub Actions runner environment."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        console: Console | None = None,
    ):
        """Initialize the platform.

        Args:
            environ: Environment to read runner variables from. Defaults to os.environ.
            console: Console used for all log lines. Defaults to stdout.
        """
        self.environ = dict(os.environ if environ is None else environ)
        self.console = console or Console(soft_wrap=True, highlight=False)
        self.outputs: dict[str, str] = {}
        self.failed = False
        self.failure_message: str | None = None

    @property
    def output_file(self) -> Path | None:
        path = self.environ.get("GITHUB_OUTPUT", "").strip()
        return Path(path) if path else None

    @property
    def context(self) -> RunContext:
        temp_dir = self.environ.get("RUNNER_TEMP", "").strip() or tempfile.gettempdir()
        return RunContext(
            repository=self.environ.get("GITHUB_REPOSITORY") or None,
            sha=self.environ.get("GITHUB_SHA") or None,
            ref=self.environ.get("GITHUB_REF") or None,
            api_url=(self.environ.get("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL).rstrip("/"),
            token=self.environ.get("GITHUB_TOKEN") or None,
            temp_dir=Path(temp_dir),
        )

    def info(self, message: str = "") -> None:
        self.console.out(message, highlight=False)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self.console.out(f"::warning::{_escape_data(message)}", highlight=False)

    def error(self, message: str) -> None:
        self.console.out(f"::error::{_escape_data(message)}", highlight=False)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Fold the enclosed log lines under a collapsible group."""
        self.console.out(f"::group::{title}", highlight=False)
        try:
            yield
        finally:
            self.console.out("::endgroup::", highlight=False)

    def set_output(self, name: str, value: object) -> None:
        text = str(value)
        self.outputs[name] = text

        output_file = self.output_file
        if output_file is None:
            self.info(f"{name}={text}")
            return

        with output_file.open("a", encoding="utf-8") as f:
            if "\n" in text:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                f.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
            else:
                f.write(f"{name}={text}\n")
        logger.debug(f"Set output {name}")

    def set_failed(self, message: str) -> None:
        """Mark the run failed. The caller decides the process exit code."""
        self.failed = True
        self.failure_message = message
        self.error(message)
