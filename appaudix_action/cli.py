"""CLI interface for the AppAudix scan step."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from appaudix_action.client.appaudix_client import AppAudixClient
from appaudix_action.consts import (
    DEFAULT_API_URL,
    INPUT_API_KEY,
    INPUT_API_URL,
    INPUT_DASHBOARD_URL,
    INPUT_FAIL_ON,
    INPUT_FILE,
    INPUT_FRAMEWORKS,
    INPUT_POLL_INTERVAL,
    INPUT_POLL_RETRIES,
    INPUT_TIMEOUT_MINUTES,
    INPUT_UPLOAD_SARIF,
    INPUT_WAIT_FOR_COMPLETION,
)
from appaudix_action.errors import ActionError, ThresholdExceeded
from appaudix_action.models.model_scan import ScanHandle
from appaudix_action.pipeline import run_scan_pipeline
from appaudix_action.reporting.github_platform import GitHubActionsPlatform

app = typer.Typer(
    name="appaudix-scan",
    help="AppAudix Security Scan - submit mobile apps for security and compliance scanning",
)

console = Console(soft_wrap=True, highlight=False)


def _env(name: str) -> str:
    """Environment variable the runner uses for an action input."""
    return f"INPUT_{name.upper()}"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _get_score_color(score: float) -> str:
    """Get color for compliance score display."""
    if score >= 80:
        return "green"
    elif score >= 50:
        return "yellow"
    else:
        return "red"


@app.command()
def scan(
    api_key: str = typer.Option(None, "--api-key", envvar=_env(INPUT_API_KEY), help="AppAudix API key"),
    file: str = typer.Option(None, "--file", "-f", envvar=_env(INPUT_FILE), help="APK, AAB or IPA to scan"),
    frameworks: str = typer.Option(
        None,
        "--frameworks",
        envvar=_env(INPUT_FRAMEWORKS),
        help="Comma-separated compliance frameworks (e.g., 'pci_dss,owasp_masvs')",
    ),
    fail_on: str = typer.Option(
        None,
        "--fail-on",
        envvar=_env(INPUT_FAIL_ON),
        help="Fail on issues at or above: critical, high, medium, low, none",
    ),
    upload_sarif: str = typer.Option(
        None, "--upload-sarif", envvar=_env(INPUT_UPLOAD_SARIF), help="Upload SARIF to code scanning (true/false)"
    ),
    wait_for_completion: str = typer.Option(
        None,
        "--wait-for-completion",
        envvar=_env(INPUT_WAIT_FOR_COMPLETION),
        help="Wait for the scan to finish (true/false)",
    ),
    timeout_minutes: str = typer.Option(
        None, "--timeout-minutes", envvar=_env(INPUT_TIMEOUT_MINUTES), help="Maximum wait in minutes"
    ),
    api_url: str = typer.Option(None, "--api-url", envvar=_env(INPUT_API_URL), help="AppAudix API base URL"),
    poll_interval: str = typer.Option(
        None, "--poll-interval-seconds", envvar=_env(INPUT_POLL_INTERVAL), help="Seconds between status polls"
    ),
    poll_retries: str = typer.Option(
        None,
        "--poll-retries",
        envvar=_env(INPUT_POLL_RETRIES),
        help="Retries for a failed status poll (0 = abort on first failure)",
    ),
    dashboard_url: str = typer.Option(
        None, "--dashboard-url", envvar=_env(INPUT_DASHBOARD_URL), help="Base URL for the report-url output"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Upload an app, wait for the scan and report the results."""
    _configure_logging(verbose)

    platform = GitHubActionsPlatform(console=console)
    inputs = {
        INPUT_API_KEY: api_key,
        INPUT_FILE: file,
        INPUT_FRAMEWORKS: frameworks,
        INPUT_FAIL_ON: fail_on,
        INPUT_UPLOAD_SARIF: upload_sarif,
        INPUT_WAIT_FOR_COMPLETION: wait_for_completion,
        INPUT_TIMEOUT_MINUTES: timeout_minutes,
        INPUT_API_URL: api_url,
        INPUT_POLL_INTERVAL: poll_interval,
        INPUT_POLL_RETRIES: poll_retries,
        INPUT_DASHBOARD_URL: dashboard_url,
    }

    try:
        run_scan_pipeline(inputs, platform)
    except ThresholdExceeded as e:
        platform.set_failed(str(e))
        raise typer.Exit(1)
    except ActionError as e:
        platform.set_failed(f"Action failed: {e}")
        raise typer.Exit(1)


@app.command()
def status(
    scan_id: str = typer.Argument(..., help="Scan identifier"),
    api_key: str = typer.Option(..., "--api-key", envvar=_env(INPUT_API_KEY), help="AppAudix API key"),
    api_url: str = typer.Option(DEFAULT_API_URL, "--api-url", envvar=_env(INPUT_API_URL), help="AppAudix API base URL"),
) -> None:
    """Show the current status of a submitted scan."""
    _configure_logging(False)

    async def fetch():
        async with AppAudixClient(api_url, api_key) as client:
            return await client.get_scan_status(ScanHandle(scan_id=scan_id))

    try:
        snapshot = asyncio.run(fetch())
    except ActionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Scan {scan_id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Status", snapshot.status.value)
    table.add_row("Progress", f"{snapshot.progress}%")
    if snapshot.message:
        table.add_row("Message", snapshot.message)

    if snapshot.results:
        results = snapshot.results
        score_color = _get_score_color(results.compliance_score)
        table.add_row("Compliance Score", f"[{score_color}]{results.compliance_score}%[/{score_color}]")
        table.add_row("Risk Level", results.risk_level)
        table.add_row("Critical", f"[red]{results.critical_issues}[/red]")
        table.add_row("High", f"[orange1]{results.high_issues}[/orange1]")
        table.add_row("Medium", f"[yellow]{results.medium_issues}[/yellow]")
        table.add_row("Low", f"[dim]{results.low_issues}[/dim]")

    console.print(table)


@app.command()
def report(
    scan_id: str = typer.Argument(..., help="Scan identifier"),
    output: str = typer.Option(None, "--output", "-o", help="Output file path (default: appaudix-<scan-id>.sarif)"),
    api_key: str = typer.Option(..., "--api-key", envvar=_env(INPUT_API_KEY), help="AppAudix API key"),
    api_url: str = typer.Option(DEFAULT_API_URL, "--api-url", envvar=_env(INPUT_API_URL), help="AppAudix API base URL"),
) -> None:
    """Download the SARIF report of a completed scan."""
    _configure_logging(False)

    async def fetch():
        async with AppAudixClient(api_url, api_key) as client:
            return await client.fetch_report(ScanHandle(scan_id=scan_id), "sarif")

    try:
        content = asyncio.run(fetch())
    except ActionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    output_path = Path(output or f"appaudix-{scan_id}.sarif")
    try:
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error writing report:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Saved SARIF report to {output_path}[/green]")


if __name__ == "__main__":
    app()
