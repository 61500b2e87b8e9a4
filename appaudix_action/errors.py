"""Error taxonomy for the scan workflow.

Every failure the workflow can end in derives from ActionError so the CLI has
a single place to turn it into a failed run. SarifError is the only one the
workflow recovers from locally.
"""


class ActionError(Exception):
    """Base class for errors that end the run in a failed state."""


class ConfigurationError(ActionError):
    """A required input is missing or an input value is invalid."""


class SubmissionError(ActionError):
    """The upload was rejected or could not be delivered.

    status_code and body are set when the server answered with a non-success
    HTTP status; body is the response text, verbatim.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ApiError(ActionError):
    """The API answered with success=false (or an unusable envelope)."""

    def __init__(self, message: str):
        self.api_message = message
        super().__init__(f"API error: {message}")


class PollError(ActionError):
    """A status query failed while waiting for the scan."""


class ScanTimeoutError(ActionError, TimeoutError):
    """The scan did not reach a terminal status within the configured timeout."""

    def __init__(self, timeout_minutes: int):
        self.timeout_minutes = timeout_minutes
        super().__init__(f"Scan timed out after {timeout_minutes} minutes")


class ScanFailedError(ActionError):
    """The remote scan ended in a terminal status other than completed."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Scan did not complete successfully. Status: {status}")


class SarifError(ActionError):
    """Downloading or forwarding the SARIF report failed (non-fatal)."""


class ThresholdExceeded(ActionError):
    """Issues were found at or above the configured severity threshold."""

    def __init__(self, threshold: str, outcome: object | None = None):
        self.threshold = threshold
        self.outcome = outcome
        super().__init__(
            f"Security scan failed: Found issues at or above '{threshold}' severity"
        )
