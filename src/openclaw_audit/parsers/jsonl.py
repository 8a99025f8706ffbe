from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from openclaw_audit.utils.capped import DEFAULT_MAX_BYTES, read_capped

MAX_LINES = 1000


@dataclass
class JsonlResult:
    entries: list[dict[str, Any]] = field(default_factory=list)
    truncated: bool = False
    total_size_bytes: int = 0


def parse_jsonl(
    path: str | Path, max_bytes: int = DEFAULT_MAX_BYTES, max_lines: int | None = MAX_LINES
) -> JsonlResult:
    """Parse a session log, bounded by ``max_bytes`` and ``max_lines``.

    ``max_lines=None`` reads every line within the byte budget. Malformed and
    non-object lines are skipped. Raises ``OSError`` if the file cannot be read.
    """
    file_path = Path(path)
    total_size = file_path.stat().st_size
    raw, byte_truncated = read_capped(file_path, max_bytes)

    lines = raw.rstrip("\n").split("\n")
    line_limit = len(lines) if max_lines is None else max_lines
    entries: list[dict[str, Any]] = []
    for line in lines[:line_limit]:
        stripped = line.strip()
        if not stripped:
            continue
        try:
            entry = json.loads(stripped)
        except ValueError:
            continue
        if isinstance(entry, dict):
            entries.append(entry)

    return JsonlResult(
        entries=entries,
        truncated=byte_truncated or len(lines) > line_limit,
        total_size_bytes=total_size,
    )
