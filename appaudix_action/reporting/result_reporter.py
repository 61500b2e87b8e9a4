"""Turn a terminal scan snapshot into outputs, a SARIF upload and a verdict."""

import logging

from rich.table import Table

from appaudix_action.client.base_client import ScanServiceClient
from appaudix_action.consts import (
    OUTPUT_COMPLIANCE_SCORE,
    OUTPUT_CRITICAL_COUNT,
    OUTPUT_HIGH_COUNT,
    OUTPUT_LOW_COUNT,
    OUTPUT_MEDIUM_COUNT,
    OUTPUT_REPORT_URL,
    OUTPUT_RISK_LEVEL,
    OUTPUT_SARIF_FILE,
    OUTPUT_STATUS,
)
from appaudix_action.errors import SarifError, ScanFailedError, ThresholdExceeded
from appaudix_action.models.model_config import ActionConfig
from appaudix_action.models.model_scan import (
    ScanHandle,
    ScanOutcome,
    ScanResults,
    ScanStatus,
    ScanStatusSnapshot,
)
from appaudix_action.reporting.github_platform import GitHubActionsPlatform
from appaudix_action.reporting.sarif import CodeScanningUploader, download_sarif
from appaudix_action.scanner.threshold import results_fail

logger = logging.getLogger(__name__)


class ResultReporter:
    """Publishes scan results and computes the pass/fail verdict."""

    def __init__(
        self,
        config: ActionConfig,
        client: ScanServiceClient,
        platform: GitHubActionsPlatform,
        uploader: CodeScanningUploader | None = None,
    ):
        self.config = config
        self.client = client
        self.platform = platform
        self.uploader = uploader or CodeScanningUploader(platform.context)

    def publish_outputs(self, handle: ScanHandle, results: ScanResults) -> None:
        set_output = self.platform.set_output
        set_output(OUTPUT_STATUS, ScanStatus.COMPLETED.value)
        set_output(OUTPUT_COMPLIANCE_SCORE, results.compliance_score)
        set_output(OUTPUT_RISK_LEVEL, results.risk_level)
        set_output(OUTPUT_CRITICAL_COUNT, results.critical_issues)
        set_output(OUTPUT_HIGH_COUNT, results.high_issues)
        set_output(OUTPUT_MEDIUM_COUNT, results.medium_issues)
        set_output(OUTPUT_LOW_COUNT, results.low_issues)
        set_output(OUTPUT_REPORT_URL, self.config.report_url(handle.scan_id))

    def print_summary(self, results: ScanResults) -> None:
        info = self.platform.info
        info()
        info("📊 Scan Results")
        info(f"   Compliance Score: {results.compliance_score}%")
        info(f"   Risk Level: {results.risk_level}")

        table = Table(title="Issues by Severity")
        table.add_column("Severity", style="cyan")
        table.add_column("Count", justify="right")
        table.add_row("Critical", f"[red]{results.critical_issues}[/red]")
        table.add_row("High", f"[orange1]{results.high_issues}[/orange1]")
        table.add_row("Medium", f"[yellow]{results.medium_issues}[/yellow]")
        table.add_row("Low", f"[dim]{results.low_issues}[/dim]")
        self.platform.console.print(table)

    async def forward_sarif(self, handle: ScanHandle, outcome: ScanOutcome) -> None:
        """Download the SARIF report and send it to code scanning.

        Raises:
            SarifError: Any step failed.
        """
        context = self.platform.context
        sarif_path = await download_sarif(self.client, handle, context.temp_dir)
        outcome.sarif_path = sarif_path
        self.platform.info(f"   Downloaded SARIF to {sarif_path}")

        self.platform.info(f"   Uploading to {context.owner}/{context.repo}")
        self.platform.info(f"   Commit: {(context.sha or '')[:7]}")
        self.platform.info(f"   Ref: {context.ref}")
        sarif_id = await self.uploader.upload(sarif_path)
        if sarif_id:
            logger.debug(f"Code scanning accepted SARIF upload {sarif_id}")

        outcome.sarif_uploaded = True
        self.platform.set_output(OUTPUT_SARIF_FILE, sarif_path)
        self.platform.info("✅ SARIF uploaded to GitHub Code Scanning")

    async def report(self, handle: ScanHandle, snapshot: ScanStatusSnapshot) -> ScanOutcome:
        """Report a terminal snapshot.

        Raises:
            ScanFailedError: The scan ended in error or cancelled.
            ThresholdExceeded: Findings at or above the fail-on threshold.
        """
        if snapshot.status != ScanStatus.COMPLETED:
            raise ScanFailedError(snapshot.status.value)

        results = snapshot.results or ScanResults()
        self.publish_outputs(handle, results)
        self.print_summary(results)

        outcome = ScanOutcome(
            handle=handle,
            status=snapshot.status,
            results=results,
        )

        if self.config.upload_sarif:
            with self.platform.group("Uploading SARIF to GitHub Code Scanning..."):
                try:
                    await self.forward_sarif(handle, outcome)
                except SarifError as e:
                    self.platform.warning(f"Failed to upload SARIF: {e}")

        outcome.outputs = dict(self.platform.outputs)
        outcome.passed = not results_fail(self.config.threshold, results)

        if not outcome.passed:
            raise ThresholdExceeded(self.config.fail_on, outcome=outcome)

        self.platform.info()
        self.platform.info("✅ Security scan passed")
        return outcome
