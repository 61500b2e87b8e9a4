"""Abstract scanning-service client defining the three remote operations."""

from abc import ABC, abstractmethod

from appaudix_action.models.model_scan import ScanHandle, ScanRequest, ScanStatusSnapshot


class ScanServiceClient(ABC):
    """Contract for the remote scanning service.

    The workflow only talks to the service through these operations, so tests
    can substitute an in-memory implementation.
    """

    @abstractmethod
    async def submit_scan(self, request: ScanRequest) -> ScanHandle:
        """Upload the binary and requested frameworks.

        Raises:
            SubmissionError: Upload rejected or not delivered.
            ApiError: Server answered success=false.
        """
        ...

    @abstractmethod
    async def get_scan_status(self, handle: ScanHandle) -> ScanStatusSnapshot:
        """Fetch the current status of a scan.

        Raises:
            PollError: Transport failure or non-success HTTP status.
            ApiError: Server answered success=false.
        """
        ...

    @abstractmethod
    async def fetch_report(self, handle: ScanHandle, report_format: str = "sarif") -> str:
        """Download the scan report as text.

        Raises:
            SarifError: The report could not be downloaded.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources. No-op by default."""
        return None
