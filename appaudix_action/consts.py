# AppAudix API configuration
DEFAULT_API_URL = "https://api.appaudix.com"
DEFAULT_DASHBOARD_URL = "https://pciappscan.com/dashboard/scans"
API_REQUEST_TIMEOUT = 60.0  # seconds, per status/report request
API_UPLOAD_TIMEOUT = 900.0  # seconds, uploads of large binaries are slow

# Input defaults
DEFAULT_FRAMEWORKS = "pci_dss"
DEFAULT_FAIL_ON = "critical"
DEFAULT_UPLOAD_SARIF = "true"
DEFAULT_WAIT_FOR_COMPLETION = "true"
DEFAULT_TIMEOUT_MINUTES = "30"

# Polling
POLL_INTERVAL_SECONDS = 15.0  # constant cadence, no backoff
DEFAULT_POLL_RETRIES = "0"  # 0 = a failed status query aborts the run
POLL_RETRY_BASE_DELAY = 2.0
POLL_RETRY_MAX_DELAY = 60.0

# Severity levels ordered by priority (rank = index)
SEVERITY_LEVELS = ["critical", "high", "medium", "low", "none"]

# SARIF / code scanning
SARIF_TOOL_NAME = "AppAudix"
SARIF_FILE_TEMPLATE = "appaudix-{scan_id}.sarif"
DEFAULT_GITHUB_API_URL = "https://api.github.com"

# Input names as declared in action.yml
INPUT_API_KEY = "api-key"
INPUT_FILE = "file"
INPUT_FRAMEWORKS = "frameworks"
INPUT_FAIL_ON = "fail-on"
INPUT_UPLOAD_SARIF = "upload-sarif"
INPUT_WAIT_FOR_COMPLETION = "wait-for-completion"
INPUT_TIMEOUT_MINUTES = "timeout-minutes"
INPUT_API_URL = "api-url"
INPUT_POLL_INTERVAL = "poll-interval-seconds"
INPUT_POLL_RETRIES = "poll-retries"
INPUT_DASHBOARD_URL = "dashboard-url"

# Output names
OUTPUT_SCAN_ID = "scan-id"
OUTPUT_STATUS = "status"
OUTPUT_COMPLIANCE_SCORE = "compliance-score"
OUTPUT_RISK_LEVEL = "risk-level"
OUTPUT_CRITICAL_COUNT = "critical-count"
OUTPUT_HIGH_COUNT = "high-count"
OUTPUT_MEDIUM_COUNT = "medium-count"
OUTPUT_LOW_COUNT = "low-count"
OUTPUT_REPORT_URL = "report-url"
OUTPUT_SARIF_FILE = "sarif-file"
