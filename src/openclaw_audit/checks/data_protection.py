from __future__ import annotations

import re
from pathlib import PurePath

from openclaw_audit.checks.base import CheckContext, file_size, name_of, read_sample
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, Severity
from openclaw_audit.models.openclaw import OpenClawConfig

CATEGORY = "Data Protection"

LOG_SAMPLE = 5
LARGE_LOG_BYTES = 50 * 1024 * 1024
PUBLIC_DIRS = {"public", "static", "dist", "build", "www"}
PII_PATTERNS = (
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    re.compile(r"\b\d{4}[\s-]\d{4}[\s-]\d{4}[\s-]\d{4}\b"),
)


def _relative_parts(path: str, root: str) -> tuple[str, ...]:
    try:
        return PurePath(path).relative_to(root).parts
    except ValueError:
        return PurePath(path).parts


def check_data_protection(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    findings: list[Finding] = []
    retention = config.retention
    has_ttl = bool(retention and retention.session_log_ttl)
    encrypted = bool(retention and retention.encrypt_at_rest)
    logs = files.session_log_files

    for path in logs[:LOG_SAMPLE]:
        content = read_sample(path)
        if content is not None and any(pattern.search(content) for pattern in PII_PATTERNS):
            findings.append(
                Finding(
                    id="DATA-001",
                    severity=Severity.HIGH,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Session log may contain PII",
                    description=f"{name_of(path)} contains patterns resembling personal data (email, card number)",
                    risk="PII in logs may violate privacy regulations and expose user data",
                    remediation="Enable PII scrubbing in session logs or reduce log verbosity",
                    file=path,
                )
            )
            break

    if not has_ttl:
        findings.append(
            Finding(
                id="DATA-002",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="No data retention policy",
                description="No session log TTL is configured so logs accumulate indefinitely",
                risk="Unbounded retention widens the exposure window of a breach",
                remediation="Set retention.sessionLogTTL to a reasonable period (e.g. 30 days)",
            )
        )

    if not encrypted:
        findings.append(
            Finding(
                id="DATA-003",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Session logs not encrypted at rest",
                description="retention.encryptAtRest is not enabled for session logs",
                risk="Plaintext logs can be read by anyone with disk access",
                remediation="Set retention.encryptAtRest to true or use full-disk encryption",
            )
        )

    if not (retention and retention.log_rotation):
        large = any((file_size(path) or 0) > LARGE_LOG_BYTES for path in logs[:LOG_SAMPLE])
        findings.append(
            Finding(
                id="DATA-004",
                severity=Severity.MEDIUM if large else Severity.LOW,
                confidence=Confidence.HIGH if large else Confidence.MEDIUM,
                category=CATEGORY,
                title="No log rotation configured",
                description=(
                    "Log rotation is disabled and session logs exceed 50MB"
                    if large
                    else "retention.logRotation is not enabled"
                ),
                risk="Unrotated logs consume disk space and increase breach exposure",
                remediation="Set retention.logRotation to true",
            )
        )

    if retention is not None and not encrypted:
        findings.append(
            Finding(
                id="DATA-005",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Backups not encrypted",
                description="Data retention is configured but encryption at rest is not enabled",
                risk="Backups containing session data are stored in plaintext",
                remediation="Set retention.encryptAtRest to true",
            )
        )

    if logs and not has_ttl:
        findings.append(
            Finding(
                id="DATA-006",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No data anonymization",
                description="Session logs exist with no retention policy or anonymization configured",
                risk="Historical logs keep identifiable conversation data",
                remediation="Configure anonymization or set a retention TTL",
            )
        )
        findings.append(
            Finding(
                id="DATA-008",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No data deletion mechanism",
                description="No retention TTL or deletion mechanism exists for session data",
                risk="Deletion requests cannot be honored without manual cleanup",
                remediation="Configure retention.sessionLogTTL or provide a deletion workflow",
            )
        )

    monitoring = config.monitoring
    if monitoring and monitoring.enabled and monitoring.provider:
        findings.append(
            Finding(
                id="DATA-007",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Third-party monitoring enabled",
                description=f"Monitoring data is sent to a third-party provider: {monitoring.provider}",
                risk="Session data or PII may be shared with an external service",
                remediation="Review what the monitoring integration sends and trim it to what is needed",
            )
        )

    if files.workspace_root:
        for path in logs:
            parts = {part.lower() for part in _relative_parts(path, files.root)[:-1]}
            if parts & PUBLIC_DIRS:
                findings.append(
                    Finding(
                        id="DATA-009",
                        severity=Severity.HIGH,
                        category=CATEGORY,
                        title="Session logs in public directory",
                        description=f"{name_of(path)} is inside a public or static directory",
                        risk="Web servers may serve these logs to anyone with the URL",
                        remediation="Move session logs out of public-facing directories",
                        file=path,
                    )
                )
                break

    if logs and not (config.tools and config.tools.audit_log):
        findings.append(
            Finding(
                id="DATA-010",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No audit trail for data access",
                description="No audit logging tracks who accesses session data",
                risk="Access to or export of conversation data cannot be traced",
                remediation="Set tools.auditLog to true",
            )
        )
    return findings
