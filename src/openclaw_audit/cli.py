from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from openclaw_audit import __version__
from openclaw_audit.analyzers.pipeline import default_workspace, scan_installation
from openclaw_audit.baseline import write_baseline
from openclaw_audit.config import load_settings
from openclaw_audit.discovery.finder import discover as discover_files
from openclaw_audit.discovery.finder import locate_root
from openclaw_audit.errors import InstallationNotFoundError
from openclaw_audit.models.findings import SEVERITY_ORDER, Severity
from openclaw_audit.models.reports import ScanResult
from openclaw_audit.output.console import render_console_report
from openclaw_audit.output.json_export import export_json_report
from openclaw_audit.telemetry import upload_report

app = typer.Typer(
    help="Audit a local OpenClaw installation for security misconfigurations.",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)

FILE_CATEGORIES = (
    ("credentials", "credential_files"),
    ("auth profiles", "auth_profile_files"),
    ("session logs", "session_log_files"),
    ("workspace markdown", "workspace_markdown_files"),
    ("skills", "skill_files"),
    ("custom commands", "custom_command_files"),
    ("skill packages", "skill_package_files"),
    ("private keys", "private_key_files"),
    ("ssh keys", "ssh_key_files"),
)


@app.callback(invoke_without_command=True)
def callback(
    version: bool = typer.Option(False, "--version", help="Show version and exit.", is_eager=True)
) -> None:
    if version:
        console.print(__version__)
        raise typer.Exit()


@app.command()
def discover(
    path: str | None = typer.Option(None, help="OpenClaw directory (default: ~/.openclaw)."),
    workspace: str | None = typer.Option(None, help="Agent workspace directory."),
    format: str = typer.Option("table", help="table|json"),
    json_output: bool = typer.Option(False, "--json", help="Shorthand for --format json."),
) -> None:
    root = locate_root(path)
    if root is None:
        console.print(f"[red]{InstallationNotFoundError(path)}[/red]")
        raise typer.Exit(code=1)

    files, warnings = discover_files(root, workspace or default_workspace(root))
    if json_output or format == "json":
        typer.echo(json.dumps({"files": files.model_dump(), "warnings": warnings}, indent=2))
        return

    console.print(f"OpenClaw directory: {files.root}")
    console.print(f"Workspace: {files.workspace_root or 'not set'}")
    console.print(f"openclaw.json: {files.config_path or 'missing'}")
    console.print(f".env: {files.env_path or 'missing'}")
    table = Table(title=f"Discovered {files.file_count()} files")
    table.add_column("Category")
    table.add_column("Count", justify="right")
    table.add_column("Paths")
    for label, field in FILE_CATEGORIES:
        paths: list[str] = getattr(files, field)
        table.add_row(label, str(len(paths)), "\n".join(paths))
    console.print(table)
    for warning in warnings:
        console.print(f"- {warning}", markup=False)


@app.command()
def scan(
    path: str | None = typer.Option(None, help="OpenClaw directory (default: ~/.openclaw)."),
    workspace: str | None = typer.Option(
        None, help="Agent workspace directory (env: OPENCLAW_AUDIT_WORKSPACE)."
    ),
    deep: bool = typer.Option(False, "--deep", help="Read up to 50MB of each session log."),
    format: str = typer.Option("text", help="text|json"),
    json_output: bool = typer.Option(False, "--json", help="Shorthand for --format json."),
    output: str | None = typer.Option(None, help="Optional JSON output file path."),
    upload: bool = typer.Option(False, "--upload", help="Upload an anonymized report (ids and severities only)."),
    fail_on: Severity | None = typer.Option(None, help="Exit non-zero if any finding >= severity."),
    no_color: bool = typer.Option(False, help="Disable color output."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logs."),
) -> None:
    _configure_logging(verbose)
    settings = load_settings(workspace=workspace)

    try:
        result, warnings = scan_installation(
            path,
            settings.workspace,
            deep=deep or settings.deep,
        )
    except InstallationNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    if json_output or format == "json":
        payload = export_json_report(result, output)
        if not output:
            typer.echo(payload)
    else:
        render_console_report(result, warnings, no_color=no_color)
        if output:
            Path(output).write_text(export_json_report(result), encoding="utf-8")

    if upload or settings.upload:
        outcome = upload_report(result, settings.api_url, version=__version__)
        if outcome.success:
            console.print("Anonymized report uploaded.")
        else:
            console.print(f"[yellow]{outcome.error}[/yellow]")

    if fail_on and _has_failures(result, fail_on):
        raise typer.Exit(code=1)


@app.command()
def init(
    path: str = typer.Option("~/.openclaw", help="Directory to write the baseline into."),
) -> None:
    """Write a hardened openclaw.json, .env and .gitignore without overwriting anything."""
    result = write_baseline(path)
    for name in result.created:
        console.print(f"[green]+ Created {result.directory / name}[/green]", soft_wrap=True)
    for name in result.skipped:
        console.print(f"[yellow]! Skipping {result.directory / name} (already exists)[/yellow]", soft_wrap=True)
    console.print("Next steps:")
    console.print("  1. Add your API keys to .env")
    console.print(f"  2. Run: openclaw-audit scan --path {result.directory}", soft_wrap=True)


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _has_failures(result: ScanResult, threshold: Severity) -> bool:
    limit = SEVERITY_ORDER[threshold]
    return any(SEVERITY_ORDER[item.severity] <= limit for item in result.findings)
