"""Strip secret-looking values from finding text before it is reported."""

from __future__ import annotations

import re

from openclaw_audit.models.findings import Finding

REDACTED = "[REDACTED]"
TEXT_FIELDS = ("title", "description", "risk", "remediation")

REDACTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"sk-ant-[A-Za-z0-9_\-]{10,}"),
    re.compile(r"\bsk-[A-Za-z0-9_\-]{16,}"),
    re.compile(r"\bAKIA[0-9A-Z]{16}\b"),
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}"),
    re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}"),
    re.compile(r"\b(?:sk|pk|rk)_(?:live|test)_[A-Za-z0-9]{10,}"),
    re.compile(r"\bxox[bpras]-[A-Za-z0-9\-]{10,}"),
    re.compile(r"\bAIza[0-9A-Za-z_\-]{35}"),
    re.compile(r"\bwhsec_[A-Za-z0-9]{10,}"),
    re.compile(r"-----BEGIN [A-Z ]*PRIVATE KEY-----"),
    re.compile(r"\bBearer\s+[A-Za-z0-9._~+/\-]{16,}=*"),
)


def redact(text: str) -> str:
    for pattern in REDACTION_PATTERNS:
        text = pattern.sub(REDACTED, text)
    return text


def sanitize_finding(finding: Finding) -> Finding:
    update = {}
    for field in TEXT_FIELDS:
        original = getattr(finding, field)
        cleaned = redact(original)
        if cleaned != original:
            update[field] = cleaned
    return finding.model_copy(update=update) if update else finding


def sanitize_findings(findings: list[Finding]) -> list[Finding]:
    return [sanitize_finding(item) for item in findings]
