import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from appaudix_action.consts import SEVERITY_LEVELS


class ScanStatus(str, Enum):
    """Server-side scan lifecycle states."""

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """True for states the scan never leaves."""
        return self in (ScanStatus.COMPLETED, ScanStatus.ERROR, ScanStatus.CANCELLED)


class FailureThreshold(str, Enum):
    """Minimum severity that fails the run, ordered critical > ... > none."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @property
    def rank(self) -> int:
        return SEVERITY_LEVELS.index(self.value)


class ScanRequest(BaseModel):
    """Everything needed to submit one binary for scanning."""

    model_config = ConfigDict(frozen=True)

    binary_path: Path = Field(description="Local path of the APK/AAB/IPA to upload")
    frameworks: list[str] = Field(description="Compliance frameworks, in request order")
    api_key: SecretStr = Field(description="AppAudix API key")
    api_base_url: str = Field(description="AppAudix API base URL")


class ScanHandle(BaseModel):
    """Correlation token returned by the service for a submitted scan."""

    model_config = ConfigDict(frozen=True)

    scan_id: str = Field(min_length=1, description="Server-assigned scan identifier")


class ScanResults(BaseModel):
    """Final counts reported for a completed scan."""

    model_config = ConfigDict(frozen=True)

    compliance_score: int | float = Field(default=0, description="0-100")
    risk_level: str = Field(default="UNKNOWN")
    critical_issues: int = Field(default=0, ge=0)
    high_issues: int = Field(default=0, ge=0)
    medium_issues: int = Field(default=0, ge=0)
    low_issues: int = Field(default=0, ge=0)

    @field_validator(
        "compliance_score",
        "critical_issues",
        "high_issues",
        "medium_issues",
        "low_issues",
        mode="before",
    )
    @classmethod
    def _missing_count_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("risk_level", mode="before")
    @classmethod
    def _missing_risk_is_unknown(cls, value: Any) -> Any:
        return value or "UNKNOWN"


class ScanStatusSnapshot(BaseModel):
    """One status poll response. Each poll supersedes the previous one."""

    status: ScanStatus
    progress: int = Field(default=0, ge=0, le=100)
    message: str | None = None
    results: ScanResults | None = None

    @field_validator("progress", mode="before")
    @classmethod
    def _normalize_progress(cls, value: Any) -> Any:
        """Missing progress is 0; numbers are rounded and clamped to 0-100."""
        if value is None:
            return 0
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return value
        if math.isfinite(value):
            return max(0, min(100, round(value)))
        return value

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def display_message(self) -> str:
        """Human readable progress text, falling back to the raw status."""
        return self.message or self.status.value


@dataclass
class ScanOutcome:
    """Result of one run of the scan workflow."""

    handle: ScanHandle
    status: ScanStatus
    results: ScanResults | None = None
    passed: bool = True
    sarif_path: Path | None = None
    sarif_uploaded: bool = False
    outputs: dict[str, str] = field(default_factory=dict)
