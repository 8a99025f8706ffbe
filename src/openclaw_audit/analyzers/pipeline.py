from __future__ import annotations

import logging
import re
import shutil
import subprocess
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

from openclaw_audit.analyzers.aggregate import aggregate, split_by_confidence
from openclaw_audit.analyzers.engine import run_checks
from openclaw_audit.checks.base import SUBPROCESS_TIMEOUT_S, CheckContext
from openclaw_audit.discovery.finder import discover, locate_root
from openclaw_audit.errors import InstallationNotFoundError
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.openclaw import OpenClawConfig
from openclaw_audit.models.reports import CHECKS_RUN, ScanResult
from openclaw_audit.output.sanitize import sanitize_findings
from openclaw_audit.parsers.config import parse_config, read_config_raw
from openclaw_audit.scoring.risk import score

logger = logging.getLogger(__name__)

VERSION_RE = re.compile(r"\d+\.\d+(?:\.\d+)?(?:[-+][0-9A-Za-z.]+)?")


def detect_version() -> str | None:
    """Ask the ``openclaw`` binary for its version; None if it is missing or slow."""
    executable = shutil.which("openclaw")
    if executable is None:
        return None
    try:
        completed = subprocess.run(
            [executable, "--version"],
            capture_output=True,
            text=True,
            timeout=SUBPROCESS_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as error:
        logger.info("openclaw --version failed: %s", error)
        return None
    if completed.returncode != 0:
        return None
    output = completed.stdout.strip()
    match = VERSION_RE.search(output)
    if match:
        return match.group(0)
    return output or None


def default_workspace(root: str | Path) -> Path | None:
    candidate = Path(root) / "workspace"
    return candidate if candidate.is_dir() else None


def run_scan(
    config: OpenClawConfig | None,
    raw_config_text: str | None,
    files: DiscoveredFiles,
    deep: bool = False,
    *,
    tool_version: str | None = None,
) -> ScanResult:
    started = time.perf_counter()
    context = CheckContext(raw_config=raw_config_text, deep=deep)

    raw_findings = run_checks(config, files, context)
    merged = aggregate(raw_findings)
    findings, suggestions = split_by_confidence(merged)
    findings = sanitize_findings(findings)
    suggestions = sanitize_findings(suggestions)

    duration_ms = int((time.perf_counter() - started) * 1000)
    result = ScanResult(
        timestamp=datetime.now(UTC).isoformat(),
        tool_version=tool_version,
        score=score(findings),
        findings=findings,
        suggestions=suggestions,
        files_scanned=files.file_count(),
        checks_run=CHECKS_RUN,
        checks_passed=max(0, CHECKS_RUN - len(findings)),
        duration_ms=duration_ms,
        platform=sys.platform,
    )
    logger.info(
        "scan finished: score=%s findings=%s suggestions=%s in %sms",
        result.score,
        len(findings),
        len(suggestions),
        duration_ms,
    )
    return result


def scan_installation(
    path: str | Path | None = None,
    workspace: str | Path | None = None,
    deep: bool = False,
) -> tuple[ScanResult, list[str]]:
    """Locate, discover, parse and scan an installation in one call.

    Raises :class:`InstallationNotFoundError` when no readable root exists.
    """
    root = locate_root(path)
    if root is None:
        raise InstallationNotFoundError(path)

    version = detect_version()
    if workspace is None:
        workspace = default_workspace(root)

    files, warnings = discover(root, workspace)

    config: OpenClawConfig | None = None
    raw: str | None = None
    if files.config_path:
        config, config_warnings = parse_config(files.config_path)
        warnings.extend(config_warnings)
        raw = read_config_raw(files.config_path)
        if config is None:
            warnings.append("openclaw.json could not be parsed; config-based checks were skipped")
    else:
        warnings.append("openclaw.json not found; config-based checks were skipped")

    return run_scan(config, raw, files, deep, tool_version=version), warnings
