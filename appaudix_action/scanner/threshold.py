from appaudix_action.consts import SEVERITY_LEVELS
from appaudix_action.models.model_scan import FailureThreshold, ScanResults


def threshold_rank(threshold: FailureThreshold | str | None) -> int | None:
    """Rank of a threshold (critical=0 ... none=4), None when unknown."""
    if threshold is None:
        return None
    value = threshold.value if isinstance(threshold, FailureThreshold) else str(threshold)
    value = value.strip().lower()
    if value not in SEVERITY_LEVELS:
        return None
    return SEVERITY_LEVELS.index(value)


def should_fail(
    threshold: FailureThreshold | str | None,
    critical: int,
    high: int,
    medium: int,
    low: int,
) -> bool:
    """Decide whether the counts fail the run for the given threshold.

    A threshold fails on its own severity and every more severe one, so
    'high' fails on high or critical findings and 'low' on any finding.
    'none' and unknown values never fail.
    """
    rank = threshold_rank(threshold)
    if rank is None or rank == FailureThreshold.NONE.rank:
        return False

    if critical > 0:
        return True
    if rank >= 1 and high > 0:
        return True
    if rank >= 2 and medium > 0:
        return True
    if rank >= 3 and low > 0:
        return True

    return False


def results_fail(threshold: FailureThreshold | str | None, results: ScanResults) -> bool:
    return should_fail(
        threshold,
        results.critical_issues,
        results.high_issues,
        results.medium_issues,
        results.low_issues,
    )
