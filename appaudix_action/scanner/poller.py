"""Poll a submitted scan until it reaches a terminal status or times out."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from appaudix_action.client.base_client import ScanServiceClient
from appaudix_action.client.retry import RetryBackoff
from appaudix_action.consts import POLL_INTERVAL_SECONDS
from appaudix_action.errors import PollError, ScanTimeoutError
from appaudix_action.models.model_scan import ScanHandle, ScanStatusSnapshot

logger = logging.getLogger(__name__)


def format_progress(snapshot: ScanStatusSnapshot) -> str:
    return f"   [{snapshot.progress}%] {snapshot.display_message}"


def _log_progress(snapshot: ScanStatusSnapshot) -> None:
    logger.info(format_progress(snapshot).strip())


class CompletionPoller:
    """Repeatedly queries scan status at a constant interval.

    The poller keeps no state machine of its own: the server drives every
    transition, the client only distinguishes terminal from non-terminal.
    Elapsed time is checked between iterations, so the run may overshoot the
    timeout by one interval plus one request.
    """

    def __init__(
        self,
        client: ScanServiceClient,
        timeout_minutes: int,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_retries: int = 0,
        on_progress: Callable[[ScanStatusSnapshot], None] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize CompletionPoller.

        Args:
            client: Scanning service client
            timeout_minutes: Total wait budget in minutes
            poll_interval: Seconds between status queries (default: 15)
            max_retries: Retries for a failed status query before giving up
                (default: 0, a single failure aborts)
            on_progress: Called with each snapshot whose progress changed
            sleep: Awaitable sleep, injectable for tests
            clock: Monotonic clock in seconds, injectable for tests
        """
        self.client = client
        self.timeout_minutes = timeout_minutes
        self.poll_interval = poll_interval
        self.max_retries = max_retries
        self._on_progress = on_progress or _log_progress
        self._sleep = sleep
        self._clock = clock

    async def wait_for_completion(self, handle: ScanHandle) -> ScanStatusSnapshot:
        """Return the first terminal snapshot for the scan.

        Raises:
            PollError: A status query failed and no retries remain.
            ApiError: The server answered success=false.
            ScanTimeoutError: No terminal status within the timeout.
        """
        start = self._clock()
        timeout_seconds = self.timeout_minutes * 60
        last_progress = -1
        retries = RetryBackoff(max_retries=self.max_retries)

        while self._clock() - start < timeout_seconds:
            try:
                snapshot = await self.client.get_scan_status(handle)
            except PollError as e:
                if retries.exhausted:
                    raise
                delay = retries.backoff()
                logger.warning(
                    f"{e}; retry {retries.attempts}/{self.max_retries} in {delay:.1f}s"
                )
                await self._sleep(delay)
                continue

            retries.reset()

            # De-duplicate output, cadence stays the same
            if snapshot.progress != last_progress:
                self._on_progress(snapshot)
                last_progress = snapshot.progress

            if snapshot.is_terminal:
                logger.debug(f"Scan {handle.scan_id} reached {snapshot.status.value}")
                return snapshot

            await self._sleep(self.poll_interval)

        raise ScanTimeoutError(self.timeout_minutes)
