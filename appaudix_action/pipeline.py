"""Scan workflow orchestration.

Stages run strictly in order, never concurrently:
1. Resolve configuration
2. Submit the binary
3. Poll until the scan is terminal (skipped when not waiting)
4. Report results, forward SARIF and decide pass/fail
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping

from appaudix_action.client.appaudix_client import AppAudixClient
from appaudix_action.client.base_client import ScanServiceClient
from appaudix_action.config import describe_config, resolve_config
from appaudix_action.consts import OUTPUT_SCAN_ID, OUTPUT_STATUS
from appaudix_action.models.model_config import ActionConfig
from appaudix_action.models.model_scan import ScanOutcome, ScanStatus
from appaudix_action.reporting.github_platform import GitHubActionsPlatform
from appaudix_action.reporting.result_reporter import ResultReporter
from appaudix_action.reporting.sarif import CodeScanningUploader
from appaudix_action.scanner.poller import CompletionPoller, format_progress

logger = logging.getLogger(__name__)


async def run_scan_workflow(
    config: ActionConfig,
    platform: GitHubActionsPlatform,
    client: ScanServiceClient | None = None,
    uploader: CodeScanningUploader | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> ScanOutcome:
    """Submit, poll and report one scan.

    Args:
        config: Resolved run configuration.
        platform: Host CI platform receiving logs and outputs.
        client: Scanning service client. An AppAudixClient bound to the
            config is created (and closed) when omitted.
        uploader: Code-scanning uploader override.
        sleep: Awaitable sleep used between polls.
        clock: Monotonic clock used for the poll timeout.

    Returns:
        ScanOutcome for a passed (or not awaited) scan.

    Raises:
        ActionError: Any fatal failure, including ThresholdExceeded.
    """
    request = config.to_scan_request()
    owns_client = client is None
    if client is None:
        client = AppAudixClient.for_request(request)

    try:
        with platform.group("Uploading app for scanning..."):
            handle = await client.submit_scan(request)

        platform.info(f"✅ Scan submitted: {handle.scan_id}")
        platform.set_output(OUTPUT_SCAN_ID, handle.scan_id)

        if not config.wait_for_completion:
            platform.info("⏭️ Not waiting for completion (wait-for-completion=false)")
            platform.set_output(OUTPUT_STATUS, ScanStatus.QUEUED.value)
            return ScanOutcome(
                handle=handle,
                status=ScanStatus.QUEUED,
                outputs=dict(platform.outputs),
            )

        poller = CompletionPoller(
            client,
            timeout_minutes=config.timeout_minutes,
            poll_interval=config.poll_interval_seconds,
            max_retries=config.poll_retries,
            on_progress=lambda snapshot: platform.info(format_progress(snapshot)),
            sleep=sleep,
            clock=clock,
        )
        with platform.group("Waiting for scan to complete..."):
            snapshot = await poller.wait_for_completion(handle)

        reporter = ResultReporter(config, client, platform, uploader=uploader)
        return await reporter.report(handle, snapshot)

    finally:
        if owns_client:
            await client.aclose()


def run_scan_pipeline(
    inputs: Mapping[str, str | None],
    platform: GitHubActionsPlatform,
    client: ScanServiceClient | None = None,
) -> ScanOutcome:
    """Resolve inputs and run the full workflow to completion.

    Raises:
        ActionError: Any fatal failure, including ThresholdExceeded.
    """
    config = resolve_config(inputs)
    describe_config(config, platform.info)
    logger.info(f"Starting scan of {config.file_path} against {config.api_url}")

    return asyncio.run(run_scan_workflow(config, platform, client=client))
