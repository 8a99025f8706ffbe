"""Output renderers."""

from openclaw_audit.output.console import render_console_report
from openclaw_audit.output.json_export import export_json_report
from openclaw_audit.output.sanitize import sanitize_finding, sanitize_findings

__all__ = [
    "export_json_report",
    "render_console_report",
    "sanitize_finding",
    "sanitize_findings",
]
