from __future__ import annotations

import re
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(r"\A\ufeff?---\s*\r?\n(.*?)\r?\n---\s*(?:\r?\n|\Z)", re.DOTALL)


def parse_frontmatter(text: str) -> dict[str, Any] | None:
    """Return the YAML metadata block of a SKILL.md, or None if absent or invalid."""
    match = FRONTMATTER_RE.match(text)
    if not match:
        return None
    try:
        payload = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return None
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        return None
    return payload
