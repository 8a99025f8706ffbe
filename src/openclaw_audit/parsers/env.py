from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_env(path: str | Path) -> dict[str, str]:
    try:
        raw = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as error:
        logger.info("failed reading env file '%s': %s", path, error)
        return {}

    values: dict[str, str] = {}
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = stripped.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export ") :].strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        values[key] = value
    return values
