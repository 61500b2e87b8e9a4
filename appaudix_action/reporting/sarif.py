"""SARIF download and forwarding to GitHub Code Scanning."""

import base64
import gzip
import logging
from pathlib import Path

import httpx

from appaudix_action.client.base_client import ScanServiceClient
from appaudix_action.consts import API_REQUEST_TIMEOUT, SARIF_FILE_TEMPLATE, SARIF_TOOL_NAME
from appaudix_action.errors import SarifError
from appaudix_action.models.model_scan import ScanHandle
from appaudix_action.reporting.github_platform import RunContext

logger = logging.getLogger(__name__)


def encode_sarif(content: str) -> str:
    """Gzip then base64 the report, as the code-scanning API expects."""
    return base64.b64encode(gzip.compress(content.encode("utf-8"))).decode("ascii")


async def download_sarif(
    client: ScanServiceClient,
    handle: ScanHandle,
    temp_dir: Path,
) -> Path:
    """Fetch the SARIF report and write it under temp_dir.

    Raises:
        SarifError: Download or write failed.
    """
    content = await client.fetch_report(handle, "sarif")
    sarif_path = temp_dir / SARIF_FILE_TEMPLATE.format(scan_id=handle.scan_id)
    try:
        temp_dir.mkdir(parents=True, exist_ok=True)
        sarif_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise SarifError(f"Failed to write SARIF to {sarif_path}: {e}") from e

    logger.debug(f"Wrote {len(content)} bytes of SARIF to {sarif_path}")
    return sarif_path


class CodeScanningUploader:
    """Uploads SARIF reports through the GitHub code-scanning REST API."""

    def __init__(
        self,
        context: RunContext,
        tool_name: str = SARIF_TOOL_NAME,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.context = context
        self.tool_name = tool_name
        self._transport = transport

    def _check_context(self) -> tuple[str, str, str, str, str]:
        ctx = self.context
        if not ctx.token:
            raise SarifError(
                "GITHUB_TOKEN not available. "
                "Ensure the job has `permissions: security-events: write`"
            )
        if not ctx.owner or not ctx.repo:
            raise SarifError("GITHUB_REPOSITORY not available (expected 'owner/repo')")
        if not ctx.sha or not ctx.ref:
            raise SarifError("GITHUB_SHA and GITHUB_REF are required to upload SARIF")
        return ctx.token, ctx.owner, ctx.repo, ctx.sha, ctx.ref

    async def upload(self, sarif_path: Path) -> str | None:
        """Upload a SARIF file for the current commit.

        Returns:
            The SARIF upload id assigned by GitHub, if any.

        Raises:
            SarifError: Missing credentials/context or the API rejected the upload.
        """
        token, owner, repo, sha, ref = self._check_context()

        try:
            sarif = encode_sarif(sarif_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise SarifError(f"Failed to read SARIF from {sarif_path}: {e}") from e

        payload = {
            "commit_sha": sha,
            "ref": ref,
            "sarif": sarif,
            "tool_name": self.tool_name,
        }

        async with httpx.AsyncClient(
            base_url=self.context.api_url,
            timeout=httpx.Timeout(API_REQUEST_TIMEOUT),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    f"/repos/{owner}/{repo}/code-scanning/sarifs", json=payload
                )
            except httpx.HTTPError as e:
                raise SarifError(f"Failed to upload SARIF: {e}") from e

        if not response.is_success:
            raise SarifError(
                f"Failed to upload SARIF: {response.status_code} {response.reason_phrase} "
                f"- {response.text[:500]}"
            )

        try:
            return response.json().get("id")
        except (ValueError, AttributeError):
            return None
