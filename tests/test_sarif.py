"""Tests for SARIF download and code-scanning upload."""

import base64
import gzip
import json
from dataclasses import replace
from pathlib import Path

import httpx
import pytest
from fakes import FakeScanClient

from appaudix_action.errors import SarifError
from appaudix_action.models.model_scan import ScanHandle
from appaudix_action.reporting.github_platform import GitHubActionsPlatform, RunContext
from appaudix_action.reporting.sarif import CodeScanningUploader, download_sarif, encode_sarif

SARIF = json.dumps({"version": "2.1.0", "runs": [{"tool": {"driver": {"name": "AppAudix"}}}]})


@pytest.fixture
def run_context(platform: GitHubActionsPlatform) -> RunContext:
    return platform.context


@pytest.fixture
def sarif_file(tmp_path: Path) -> Path:
    path = tmp_path / "report.sarif"
    path.write_text(SARIF, encoding="utf-8")
    return path


class TestEncodeSarif:
    """Tests for encode_sarif."""

    def test_gzip_then_base64(self) -> None:
        encoded = encode_sarif(SARIF)
        assert gzip.decompress(base64.b64decode(encoded)).decode("utf-8") == SARIF


class TestDownloadSarif:
    """Tests for download_sarif."""

    @pytest.mark.asyncio
    async def test_writes_report_to_temp_dir(self, tmp_path: Path) -> None:
        client = FakeScanClient(report=SARIF)

        path = await download_sarif(client, ScanHandle(scan_id="scan-42"), tmp_path / "runner")

        assert path == tmp_path / "runner" / "appaudix-scan-42.sarif"
        assert path.read_text(encoding="utf-8") == SARIF
        assert client.report_calls == 1

    @pytest.mark.asyncio
    async def test_download_failure_propagates(self, tmp_path: Path) -> None:
        client = FakeScanClient(report_error=SarifError("Failed to download SARIF: 404 Not Found"))

        with pytest.raises(SarifError, match="404"):
            await download_sarif(client, ScanHandle(scan_id="scan-42"), tmp_path)

        assert not (tmp_path / "appaudix-scan-42.sarif").exists()


class TestCodeScanningUploader:
    """Tests for CodeScanningUploader."""

    @pytest.mark.asyncio
    async def test_upload(self, run_context: RunContext, sarif_file: Path) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, json={"id": "sarif-1", "url": "https://api.github.test/x"})

        uploader = CodeScanningUploader(run_context, transport=httpx.MockTransport(handler))
        sarif_id = await uploader.upload(sarif_file)

        assert sarif_id == "sarif-1"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.host == "api.github.test"
        assert request.url.path == "/repos/octo-org/mobile-app/code-scanning/sarifs"
        assert request.headers["Authorization"] == "Bearer ghs_test"

        payload = json.loads(request.content)
        assert payload["commit_sha"] == run_context.sha
        assert payload["ref"] == "refs/heads/main"
        assert payload["tool_name"] == "AppAudix"
        assert gzip.decompress(base64.b64decode(payload["sarif"])).decode("utf-8") == SARIF

    @pytest.mark.asyncio
    async def test_missing_token(self, run_context: RunContext, sarif_file: Path) -> None:
        uploader = CodeScanningUploader(replace(run_context, token=None))

        with pytest.raises(SarifError, match="GITHUB_TOKEN not available"):
            await uploader.upload(sarif_file)

    @pytest.mark.asyncio
    async def test_missing_repository(self, run_context: RunContext, sarif_file: Path) -> None:
        uploader = CodeScanningUploader(replace(run_context, repository=None))

        with pytest.raises(SarifError, match="GITHUB_REPOSITORY"):
            await uploader.upload(sarif_file)

    @pytest.mark.asyncio
    async def test_missing_commit(self, run_context: RunContext, sarif_file: Path) -> None:
        uploader = CodeScanningUploader(replace(run_context, sha=None))

        with pytest.raises(SarifError, match="GITHUB_SHA"):
            await uploader.upload(sarif_file)

    @pytest.mark.asyncio
    async def test_rejected_upload(self, run_context: RunContext, sarif_file: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"message": "Resource not accessible by integration"})

        uploader = CodeScanningUploader(run_context, transport=httpx.MockTransport(handler))

        with pytest.raises(SarifError, match="403"):
            await uploader.upload(sarif_file)

    @pytest.mark.asyncio
    async def test_transport_error(self, run_context: RunContext, sarif_file: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("network down")

        uploader = CodeScanningUploader(run_context, transport=httpx.MockTransport(handler))

        with pytest.raises(SarifError, match="network down"):
            await uploader.upload(sarif_file)
