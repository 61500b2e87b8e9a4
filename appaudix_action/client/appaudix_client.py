"""AppAudix REST API client.

Every call is attempted once. Retrying status queries is the poller's
decision, never the client's.
"""

import logging
from typing import Any

import httpx
from pydantic import SecretStr, ValidationError

from appaudix_action.client.base_client import ScanServiceClient
from appaudix_action.consts import API_REQUEST_TIMEOUT, API_UPLOAD_TIMEOUT
from appaudix_action.errors import ApiError, PollError, SarifError, SubmissionError
from appaudix_action.models.model_scan import ScanHandle, ScanRequest, ScanStatusSnapshot

logger = logging.getLogger(__name__)


def _unwrap_envelope(response: httpx.Response) -> dict[str, Any]:
    """Return the data member of a {success, data, error} envelope.

    Raises:
        ApiError: On a non-JSON body or success=false.
    """
    try:
        payload = response.json()
    except ValueError:
        raise ApiError(f"Invalid JSON response: {response.text[:200]}") from None

    if not isinstance(payload, dict):
        raise ApiError("Unexpected response format")

    if not payload.get("success"):
        error = payload.get("error") or {}
        message = error.get("message") if isinstance(error, dict) else None
        raise ApiError(message or "Unknown error")

    data = payload.get("data")
    return data if isinstance(data, dict) else {}


class AppAudixClient(ScanServiceClient):
    """httpx-based client for the AppAudix v2 scans API."""

    def __init__(
        self,
        api_url: str,
        api_key: SecretStr | str,
        request_timeout: float = API_REQUEST_TIMEOUT,
        upload_timeout: float = API_UPLOAD_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_url: API base URL, e.g. https://api.appaudix.com.
            api_key: Bearer credential.
            request_timeout: Timeout for status and report requests in seconds.
            upload_timeout: Timeout for the binary upload in seconds.
            transport: Optional transport override (used by tests).
        """
        self.api_url = api_url.rstrip("/")
        self._api_key = api_key if isinstance(api_key, SecretStr) else SecretStr(api_key)
        self.request_timeout = request_timeout
        self.upload_timeout = upload_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def for_request(cls, request: ScanRequest, **kwargs: Any) -> "AppAudixClient":
        """Build a client bound to the endpoint and credential of a scan request."""
        return cls(request.api_base_url, request.api_key, **kwargs)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=httpx.Timeout(self.request_timeout),
                headers={"Authorization": f"Bearer {self._api_key.get_secret_value()}"},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "AppAudixClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def submit_scan(self, request: ScanRequest) -> ScanHandle:
        """Upload the binary with one `frameworks` field per framework."""
        client = await self._get_client()
        file_name = request.binary_path.name

        logger.info(f"Uploading {file_name} for frameworks: {request.frameworks}")
        try:
            with request.binary_path.open("rb") as binary:
                response = await client.post(
                    "/v2/scans",
                    data={"frameworks": list(request.frameworks)},
                    files={"file": (file_name, binary, "application/octet-stream")},
                    timeout=httpx.Timeout(self.upload_timeout),
                )
        except OSError as e:
            raise SubmissionError(f"Failed to read {request.binary_path}: {e}") from e
        except httpx.HTTPError as e:
            raise SubmissionError(f"Failed to submit scan: {e}") from e

        if not response.is_success:
            body = response.text
            raise SubmissionError(
                f"Failed to submit scan: {response.status_code} {response.reason_phrase} - {body}",
                status_code=response.status_code,
                body=body,
            )

        data = _unwrap_envelope(response)
        scan_id = data.get("scan_id")
        if not scan_id:
            raise ApiError("Response did not include a scan_id")

        return ScanHandle(scan_id=str(scan_id))

    async def get_scan_status(self, handle: ScanHandle) -> ScanStatusSnapshot:
        client = await self._get_client()
        try:
            response = await client.get(
                f"/v2/scans/{handle.scan_id}",
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise PollError(f"Failed to get scan status: {e}") from e

        if not response.is_success:
            raise PollError(
                f"Failed to get scan status: {response.status_code} {response.reason_phrase}"
            )

        data = _unwrap_envelope(response)
        try:
            return ScanStatusSnapshot.model_validate(data)
        except ValidationError as e:
            raise ApiError(f"Unexpected scan status payload: {e}") from e

    async def fetch_report(self, handle: ScanHandle, report_format: str = "sarif") -> str:
        client = await self._get_client()
        try:
            response = await client.get(
                f"/v2/scans/{handle.scan_id}/report",
                params={"format": report_format},
            )
        except httpx.HTTPError as e:
            raise SarifError(f"Failed to download {report_format.upper()}: {e}") from e

        if not response.is_success:
            raise SarifError(
                f"Failed to download {report_format.upper()}: "
                f"{response.status_code} {response.reason_phrase}"
            )

        return response.text
