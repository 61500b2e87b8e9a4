"""Clients for the remote scanning service."""

from appaudix_action.client.appaudix_client import AppAudixClient
from appaudix_action.client.base_client import ScanServiceClient
from appaudix_action.client.retry import RetryBackoff

__all__ = ["AppAudixClient", "RetryBackoff", "ScanServiceClient"]
