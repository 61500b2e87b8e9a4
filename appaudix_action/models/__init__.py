"""Pydantic models for the AppAudix scan step."""

from appaudix_action.models.model_config import ActionConfig
from appaudix_action.models.model_scan import (
    FailureThreshold,
    ScanHandle,
    ScanOutcome,
    ScanRequest,
    ScanResults,
    ScanStatus,
    ScanStatusSnapshot,
)

__all__ = [
    # Configuration
    "ActionConfig",
    # Scan models
    "FailureThreshold",
    "ScanHandle",
    "ScanOutcome",
    "ScanRequest",
    "ScanResults",
    "ScanStatus",
    "ScanStatusSnapshot",
]
