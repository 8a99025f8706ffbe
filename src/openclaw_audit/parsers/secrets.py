"""Secret-like token patterns shared by the detectors and the sanitizer."""

from __future__ import annotations

import re
from dataclasses import dataclass

API_KEY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"sk-[a-zA-Z0-9]{32,}"),
    re.compile(r"sk-ant-[a-zA-Z0-9\-]{32,}"),
    re.compile(r"AIza[a-zA-Z0-9_\-]{35}"),
    re.compile(r"AKIA[A-Z0-9]{16}"),
    re.compile(r"(?:ghp|gho|ghu|ghs|ghr)_[a-zA-Z0-9]{36,}"),
    re.compile(r"(?:sk|pk)_(?:live|test)_[a-zA-Z0-9]{20,}"),
    re.compile(r"xox[bpras]-[a-zA-Z0-9\-]{10,}"),
)

NAMED_SECRET_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Anthropic API key", re.compile(r"sk-ant-[a-zA-Z0-9\-_]{20,}")),
    ("OpenAI API key", re.compile(r"\bsk-(?!ant-)[a-zA-Z0-9\-_]{20,}")),
    ("Google API key", re.compile(r"AIza[a-zA-Z0-9_\-]{35}")),
    ("AWS access key", re.compile(r"\bAKIA[A-Z0-9]{16}\b")),
    ("GitHub token", re.compile(r"\b(?:ghp|gho|ghu|ghs|ghr)_[a-zA-Z0-9]{36,}")),
    ("GitHub fine-grained token", re.compile(r"\bgithub_pat_[a-zA-Z0-9_]{22,}")),
    ("Stripe key", re.compile(r"\b(?:sk|pk|rk)_(?:live|test)_[a-zA-Z0-9]{20,}")),
    ("Slack token", re.compile(r"\bxox[bpras]-[a-zA-Z0-9\-]{10,}")),
    ("Private key", re.compile(r"-----BEGIN (?:[A-Z]+ )*PRIVATE KEY-----")),
    (
        "Secret assignment",
        re.compile(
            r"(?i)\b(?:api[_-]?key|secret|password|passwd|access[_-]?token)\s*[:=]\s*"
            r"[\"']?(?!\$\{)[A-Za-z0-9_\-/+=.]{16,}"
        ),
    ),
)


@dataclass(frozen=True)
class SecretMatch:
    pattern: str
    line: int


def find_secrets(text: str) -> list[SecretMatch]:
    """Return every secret-like hit in ``text`` with its 1-based line number."""
    matches: list[SecretMatch] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        for name, pattern in NAMED_SECRET_PATTERNS:
            if pattern.search(line):
                matches.append(SecretMatch(pattern=name, line=line_number))
    return matches


def count_api_keys(text: str) -> int:
    return sum(len(pattern.findall(text)) for pattern in API_KEY_PATTERNS)


def contains_api_key(text: str) -> bool:
    return any(pattern.search(text) for pattern in API_KEY_PATTERNS)


def api_key_values(text: str) -> list[str]:
    values: list[str] = []
    for pattern in API_KEY_PATTERNS:
        values.extend(match.group(0) for match in pattern.finditer(text))
    return values
