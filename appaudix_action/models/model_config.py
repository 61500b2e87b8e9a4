from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from appaudix_action.consts import (
    DEFAULT_API_URL,
    DEFAULT_DASHBOARD_URL,
    DEFAULT_FAIL_ON,
    POLL_INTERVAL_SECONDS,
)
from appaudix_action.models.model_scan import FailureThreshold, ScanRequest


class ActionConfig(BaseModel):
    """Resolved, validated run parameters. Fixed for the whole run."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr = Field(description="AppAudix API key")
    file_path: Path = Field(description="Binary to upload")
    frameworks: list[str] = Field(default_factory=lambda: ["pci_dss"])
    fail_on: str = Field(
        default=DEFAULT_FAIL_ON,
        description="Severity threshold; unknown values never fail the run",
    )
    upload_sarif: bool = True
    wait_for_completion: bool = True
    timeout_minutes: int = Field(default=30, gt=0)
    api_url: str = DEFAULT_API_URL
    poll_interval_seconds: float = Field(default=POLL_INTERVAL_SECONDS, gt=0)
    poll_retries: int = Field(default=0, ge=0)
    dashboard_url: str = DEFAULT_DASHBOARD_URL

    @property
    def threshold(self) -> FailureThreshold | None:
        """fail_on as an enum member, or None when it is not a known level."""
        try:
            return FailureThreshold(self.fail_on)
        except ValueError:
            return None

    def to_scan_request(self) -> ScanRequest:
        return ScanRequest(
            binary_path=self.file_path,
            frameworks=list(self.frameworks),
            api_key=self.api_key,
            api_base_url=self.api_url,
        )

    def report_url(self, scan_id: str) -> str:
        return f"{self.dashboard_url.rstrip('/')}/{scan_id}"
