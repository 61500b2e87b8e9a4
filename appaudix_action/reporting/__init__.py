"""Result reporting to the host CI platform."""

from appaudix_action.reporting.github_platform import GitHubActionsPlatform, RunContext
from appaudix_action.reporting.result_reporter import ResultReporter
from appaudix_action.reporting.sarif import CodeScanningUploader, download_sarif, encode_sarif

__all__ = [
    "CodeScanningUploader",
    "GitHubActionsPlatform",
    "ResultReporter",
    "RunContext",
    "download_sarif",
    "encode_sarif",
]
