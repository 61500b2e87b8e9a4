import logging
import random

from appaudix_action.consts import POLL_RETRY_BASE_DELAY, POLL_RETRY_MAX_DELAY

logger = logging.getLogger(__name__)


class RetryBackoff:
    """Bounded retry budget with exponential backoff and jitter."""

    def __init__(
        self,
        max_retries: int = 0,
        initial_delay: float = POLL_RETRY_BASE_DELAY,
        max_delay: float = POLL_RETRY_MAX_DELAY,
        backoff_factor: float = 2.0,
        jitter_factor: float = 0.1,
    ):
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter_factor = jitter_factor
        self._current_delay = initial_delay
        self._consecutive_errors = 0

    @property
    def exhausted(self) -> bool:
        """True once every allowed retry has been used."""
        return self._consecutive_errors >= self.max_retries

    @property
    def attempts(self) -> int:
        return self._consecutive_errors

    def reset(self) -> None:
        """Reset delay after a successful request."""
        self._current_delay = self.initial_delay
        self._consecutive_errors = 0

    def backoff(self) -> float:
        """Consume one retry and return the delay to wait before it."""
        delay = self._current_delay
        self._consecutive_errors += 1
        self._current_delay = min(
            self._current_delay * self.backoff_factor,
            self.max_delay,
        )
        # +/- jitter_factor of the delay
        jitter = delay * self.jitter_factor * (2 * random.random() - 1)
        return delay + jitter
