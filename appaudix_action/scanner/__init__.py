"""Scan completion polling and verdict evaluation."""

from appaudix_action.scanner.poller import CompletionPoller
from appaudix_action.scanner.threshold import results_fail, should_fail, threshold_rank

__all__ = [
    "CompletionPoller",
    "results_fail",
    "should_fail",
    "threshold_rank",
]
