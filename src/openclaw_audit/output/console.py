from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from openclaw_audit.models.findings import SEVERITY_ORDER, Finding, Severity
from openclaw_audit.models.reports import ScanResult
from openclaw_audit.scoring.risk import score_grade

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold magenta",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}


def _ordered(findings: list[Finding]) -> list[Finding]:
    return sorted(findings, key=lambda item: SEVERITY_ORDER[item.severity])


def _findings_table(title: str, findings: list[Finding]) -> Table:
    table = Table(title=title)
    table.add_column("Severity")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("File")
    for item in _ordered(findings):
        style = SEVERITY_STYLES.get(item.severity, "")
        table.add_row(
            f"[{style}]{item.severity.value}[/{style}]" if style else item.severity.value,
            item.id,
            escape(item.title),
            escape(item.file or ""),
        )
    return table


def render_console_report(
    result: ScanResult,
    warnings: list[str] | None = None,
    *,
    no_color: bool = False,
    console: Console | None = None,
) -> None:
    console = console or Console(no_color=no_color)
    grade = score_grade(result.score)
    console.print(
        f"Security score: [bold {grade.color}]{result.score}/100 {grade.letter} ({grade.label})[/bold {grade.color}]"
    )
    console.print(
        f"Files scanned: {result.files_scanned}  Checks passed: {result.checks_passed}/{result.checks_run}"
        f"  Duration: {result.duration_ms}ms"
    )

    if result.findings:
        console.print(_findings_table("openclaw-audit findings", result.findings))
        console.print("Remediation:")
        for item in _ordered(result.findings):
            console.print(f"- {item.id}: {escape(item.remediation)}")
    else:
        console.print("No findings.")

    if result.suggestions:
        console.print(_findings_table("Suggestions (low confidence, not scored)", result.suggestions))

    if warnings:
        console.print("Warnings:")
        for warning in warnings:
            console.print(f"- {warning}", markup=False)
