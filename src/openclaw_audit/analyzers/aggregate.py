from __future__ import annotations

from pathlib import Path

from openclaw_audit.models.findings import Confidence, Finding

MAX_LISTED_FILES = 3


def aggregate(findings: list[Finding]) -> list[Finding]:
    """Collapse findings that share an id into one, in first-seen order.

    When a group spans more than one file the description is rewritten to
    count the occurrences and name the first few files.
    """
    groups: dict[str, list[Finding]] = {}
    for finding in findings:
        groups.setdefault(finding.id, []).append(finding)

    merged: list[Finding] = []
    for group in groups.values():
        first = group[0]
        if len(group) == 1:
            merged.append(first)
            continue

        distinct_files: list[str] = []
        for finding in group:
            if finding.file and finding.file not in distinct_files:
                distinct_files.append(finding.file)

        update: dict[str, object] = {"file": distinct_files[0] if distinct_files else None}
        if len(distinct_files) > 1:
            names = ", ".join(Path(item).name for item in distinct_files[:MAX_LISTED_FILES])
            extra = len(distinct_files) - MAX_LISTED_FILES
            if extra > 0:
                names = f"{names}... and {extra} more"
            update["description"] = f"{first.title} ({len(group)} occurrences in: {names})"
        merged.append(first.model_copy(update=update))
    return merged


def split_by_confidence(findings: list[Finding]) -> tuple[list[Finding], list[Finding]]:
    """Return ``(findings, suggestions)``; low-confidence items become suggestions."""
    kept = [item for item in findings if item.confidence != Confidence.LOW]
    suggestions = [item for item in findings if item.confidence == Confidence.LOW]
    return kept, suggestions
