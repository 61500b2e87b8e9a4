"""Resolve and validate run parameters from string-typed action inputs."""

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path

from pydantic import SecretStr, ValidationError

from appaudix_action.consts import (
    DEFAULT_API_URL,
    DEFAULT_DASHBOARD_URL,
    DEFAULT_FAIL_ON,
    DEFAULT_FRAMEWORKS,
    DEFAULT_POLL_RETRIES,
    DEFAULT_TIMEOUT_MINUTES,
    DEFAULT_UPLOAD_SARIF,
    DEFAULT_WAIT_FOR_COMPLETION,
    INPUT_API_KEY,
    INPUT_API_URL,
    INPUT_DASHBOARD_URL,
    INPUT_FAIL_ON,
    INPUT_FILE,
    INPUT_FRAMEWORKS,
    INPUT_POLL_INTERVAL,
    INPUT_POLL_RETRIES,
    INPUT_TIMEOUT_MINUTES,
    INPUT_UPLOAD_SARIF,
    INPUT_WAIT_FOR_COMPLETION,
    POLL_INTERVAL_SECONDS,
    SEVERITY_LEVELS,
)
from appaudix_action.errors import ConfigurationError
from appaudix_action.models.model_config import ActionConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"true", "yes", "1", "on"}
_FALSE_VALUES = {"false", "no", "0", "off"}


def parse_frameworks(raw: str) -> list[str]:
    """Split a comma-separated framework list, keeping order and duplicates."""
    return [f.strip() for f in raw.split(",") if f.strip()]


def parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Input '{name}' must be a boolean (true/false), got '{raw}'")


def parse_int(name: str, raw: str, minimum: int) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"Input '{name}' must be an integer, got '{raw}'") from None
    if value < minimum:
        raise ConfigurationError(f"Input '{name}' must be at least {minimum}, got {value}")
    return value


def parse_float(name: str, raw: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError:
        raise ConfigurationError(f"Input '{name}' must be a number, got '{raw}'") from None
    if value <= 0:
        raise ConfigurationError(f"Input '{name}' must be positive, got {value}")
    return value


def _require(inputs: Mapping[str, str | None], name: str) -> str:
    value = (inputs.get(name) or "").strip()
    if not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def _optional(inputs: Mapping[str, str | None], name: str, default: str) -> str:
    return (inputs.get(name) or "").strip() or default


def _validate_file(raw_path: str) -> Path:
    path = Path(raw_path).expanduser()
    if not path.exists():
        raise ConfigurationError(f"File not found: {raw_path}")
    if not path.is_file():
        raise ConfigurationError(f"Not a regular file: {raw_path}")
    if not os.access(path, os.R_OK):
        raise ConfigurationError(f"File is not readable: {raw_path}")
    return path


def resolve_config(inputs: Mapping[str, str | None]) -> ActionConfig:
    """Build the run configuration from raw action inputs.

    Args:
        inputs: Input name (as declared in action.yml) to raw string value.
            Missing and empty values fall back to the defaults.

    Returns:
        Validated ActionConfig.

    Raises:
        ConfigurationError: On a missing required input, a missing or
            unreadable file, or a malformed value.
    """
    api_key = _require(inputs, INPUT_API_KEY)
    file_path = _validate_file(_require(inputs, INPUT_FILE))

    frameworks = parse_frameworks(_optional(inputs, INPUT_FRAMEWORKS, DEFAULT_FRAMEWORKS))
    if not frameworks:
        frameworks = parse_frameworks(DEFAULT_FRAMEWORKS)

    fail_on = _optional(inputs, INPUT_FAIL_ON, DEFAULT_FAIL_ON).lower()
    if fail_on not in SEVERITY_LEVELS:
        logger.warning(
            f"Unknown fail-on value '{fail_on}', the run will not fail on findings "
            f"(expected one of: {', '.join(SEVERITY_LEVELS)})"
        )

    try:
        return ActionConfig(
            api_key=SecretStr(api_key),
            file_path=file_path,
            frameworks=frameworks,
            fail_on=fail_on,
            upload_sarif=parse_bool(
                INPUT_UPLOAD_SARIF, _optional(inputs, INPUT_UPLOAD_SARIF, DEFAULT_UPLOAD_SARIF)
            ),
            wait_for_completion=parse_bool(
                INPUT_WAIT_FOR_COMPLETION,
                _optional(inputs, INPUT_WAIT_FOR_COMPLETION, DEFAULT_WAIT_FOR_COMPLETION),
            ),
            timeout_minutes=parse_int(
                INPUT_TIMEOUT_MINUTES,
                _optional(inputs, INPUT_TIMEOUT_MINUTES, DEFAULT_TIMEOUT_MINUTES),
                minimum=1,
            ),
            api_url=_optional(inputs, INPUT_API_URL, DEFAULT_API_URL).rstrip("/"),
            poll_interval_seconds=parse_float(
                INPUT_POLL_INTERVAL,
                _optional(inputs, INPUT_POLL_INTERVAL, str(POLL_INTERVAL_SECONDS)),
            ),
            poll_retries=parse_int(
                INPUT_POLL_RETRIES,
                _optional(inputs, INPUT_POLL_RETRIES, DEFAULT_POLL_RETRIES),
                minimum=0,
            ),
            dashboard_url=_optional(inputs, INPUT_DASHBOARD_URL, DEFAULT_DASHBOARD_URL),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def describe_config(config: ActionConfig, emit: Callable[[str], None]) -> None:
    """Emit the short pre-flight summary shown before the upload starts."""
    size_mb = config.file_path.stat().st_size / (1024 * 1024)
    emit("📱 AppAudix Security Scan")
    emit(f"   File: {config.file_path.name} ({size_mb:.2f} MB)")
    emit(f"   Frameworks: {', '.join(config.frameworks)}")
    emit(f"   Fail on: {config.fail_on}")
