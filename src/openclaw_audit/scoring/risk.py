from __future__ import annotations

from dataclasses import dataclass

from openclaw_audit.models.findings import Finding, Severity

MAX_SCORE = 100
CRITICAL_CAP = 40

SEVERITY_PENALTIES = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 8,
    Severity.MEDIUM: 3,
    Severity.LOW: 1,
}


@dataclass(frozen=True)
class Grade:
    letter: str
    label: str
    color: str


GRADE_BANDS: tuple[tuple[int, Grade], ...] = (
    (90, Grade("A+", "Excellent", "green")),
    (80, Grade("A", "Good", "green")),
    (70, Grade("B", "Fair", "yellow")),
    (50, Grade("C", "Needs Work", "yellow")),
    (30, Grade("D", "Poor", "red")),
)
FAILING_GRADE = Grade("F", "Critical", "magenta")


def score(findings: list[Finding]) -> int:
    """Score scored findings from 100 down; any CRITICAL caps the result at 40."""
    total = MAX_SCORE - sum(SEVERITY_PENALTIES.get(item.severity, 0) for item in findings)
    total = max(0, total)
    if any(item.severity == Severity.CRITICAL for item in findings):
        total = min(total, CRITICAL_CAP)
    return total


def score_grade(value: int) -> Grade:
    for threshold, grade in GRADE_BANDS:
        if value >= threshold:
            return grade
    return FAILING_GRADE
