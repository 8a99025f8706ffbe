from __future__ import annotations

from pathlib import Path

from openclaw_audit.models.reports import ScanResult


def export_json_report(result: ScanResult, output: str | None = None) -> str:
    payload = result.model_dump_json(indent=2, by_alias=True)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
    return payload
