from __future__ import annotations

import re
from pathlib import Path

from openclaw_audit.checks.base import (
    CheckContext,
    load_package,
    name_of,
    package_dependencies,
    run_git,
)
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, Severity
from openclaw_audit.models.openclaw import OpenClawConfig

CATEGORY = "Operational Security"

PACKAGE_SAMPLE = 5
MAX_PRERELEASE_DEPS = 3
PRERELEASE_RE = re.compile(r"^[~^]?0\.")
SECRET_FILE_RE = re.compile(r"\.env|\.pem|\.key|id_rsa|credentials\.json|service-account", re.IGNORECASE)


def _has_secret_history(workspace: str) -> bool:
    if not (Path(workspace) / ".git").exists():
        return False
    output = run_git(["log", "--oneline", "-20", "--diff-filter=A", "--name-only"], workspace)
    return bool(output and SECRET_FILE_RE.search(output))


def check_operational(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    findings: list[Finding] = []
    monitored = bool(config.monitoring and config.monitoring.enabled)

    if not monitored:
        findings.append(
            Finding(
                id="OPS-001",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No structured logging configured",
                description="No monitoring or structured logging integration detected",
                risk="Unstructured logs make incident investigation difficult",
                remediation="Set monitoring.enabled to true with a structured logging provider",
            )
        )

    if config.verbose and config.verbose.enabled is True:
        findings.append(
            Finding(
                id="OPS-002",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Verbose error output enabled",
                description="Verbose mode is enabled globally so errors may expose internal details",
                risk="Verbose errors can leak file paths, stack traces or configuration",
                remediation="Disable verbose mode in production or restrict it to admins",
                file=files.config_path,
            )
        )

    if not monitored:
        findings.append(
            Finding(
                id="OPS-003",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No monitoring or alerting",
                description="No monitoring provider is configured for security event alerting",
                risk="Security incidents may go unnoticed",
                remediation="Set monitoring.enabled to true and alert on anomalous activity",
            )
        )

    for path in files.skill_package_files[:PACKAGE_SAMPLE]:
        package = load_package(path)
        if package is None:
            continue
        prerelease = [name for name, spec in package_dependencies(package).items() if PRERELEASE_RE.match(spec)]
        if len(prerelease) > MAX_PRERELEASE_DEPS:
            findings.append(
                Finding(
                    id="OPS-004",
                    severity=Severity.LOW,
                    confidence=Confidence.LOW,
                    category=CATEGORY,
                    title="Potentially stale dependencies",
                    description=f"{name_of(path)} has {len(prerelease)} dependencies at major version 0.x",
                    risk="Pre-1.0 dependencies may lack security patches",
                    remediation="Review and update dependencies to current stable versions",
                    file=path,
                )
            )
            break

    config_text = config.to_text().lower()
    if not any(marker in config_text for marker in ("health", "readiness", "liveness")):
        findings.append(
            Finding(
                id="OPS-005",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No health check endpoint configured",
                description="No health, readiness or liveness check configuration found",
                risk="Hung or crashed agents go unnoticed",
                remediation="Configure a health check endpoint for monitoring agent status",
            )
        )

    if files.workspace_root and _has_secret_history(files.workspace_root):
        findings.append(
            Finding(
                id="OPS-006",
                severity=Severity.HIGH,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Secret files in git history",
                description="Git history shows .env, .pem, .key or credential files were committed",
                risk="Secrets stay recoverable from git history even after deletion",
                remediation="Purge the files from history with git filter-repo, then rotate the affected credentials",
            )
        )

    if not any(marker in config_text for marker in ("backup", "rollback", "snapshot")):
        findings.append(
            Finding(
                id="OPS-007",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No rollback plan configured",
                description="No backup, rollback or snapshot configuration found",
                risk="A misconfigured agent cannot be reverted quickly",
                remediation="Keep configuration backups and document a rollback procedure",
            )
        )
    return findings
