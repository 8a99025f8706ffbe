from __future__ import annotations

import logging
import re
from pathlib import Path

import json5
from pydantic import ValidationError

from openclaw_audit.models.openclaw import OpenClawConfig

logger = logging.getLogger(__name__)

EXOTIC_VALUE_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r":\s*Infinity\b"), "Config contains 'Infinity' value, this may be unintentional"),
    (re.compile(r":\s*-Infinity\b"), "Config contains '-Infinity' value, this may be unintentional"),
    (re.compile(r":\s*NaN\b"), "Config contains 'NaN' value, this may be unintentional"),
    (
        re.compile(r":\s*0x[0-9a-fA-F]+"),
        "Config contains hexadecimal literal, consider decimal notation for clarity",
    ),
)


def check_exotic_values(raw: str) -> list[str]:
    return [message for pattern, message in EXOTIC_VALUE_RULES if pattern.search(raw)]


def read_config_raw(path: str | Path) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as error:
        logger.info("failed reading config '%s': %s", path, error)
        return None


def _drop_invalid_values(payload: dict, error: ValidationError) -> list[str]:
    """Remove the innermost object keys named by ``error`` and return their dotted paths."""
    targets: dict[tuple[str, ...], None] = {}
    for detail in error.errors():
        node: object = payload
        key_path: list[str] = []
        for part in detail["loc"]:
            if not isinstance(node, dict) or not isinstance(part, str) or part not in node:
                break
            key_path.append(part)
            node = node[part]
        if key_path:
            targets[tuple(key_path)] = None

    dropped = []
    for key_path in targets:
        parent: object = payload
        for part in key_path[:-1]:
            parent = parent.get(part) if isinstance(parent, dict) else None
        if isinstance(parent, dict) and key_path[-1] in parent:
            del parent[key_path[-1]]
            dropped.append(".".join(key_path))
    return dropped


def parse_config(path: str | Path) -> tuple[OpenClawConfig | None, list[str]]:
    """Parse ``openclaw.json`` (JSON5).

    Returns ``(None, warnings)`` when the file is unreadable, is not valid JSON5
    or is not an object. A value that does not fit the config model is dropped
    with a warning and the rest of the object is kept, so one mistyped field
    never disables the config-based checks.
    """
    raw = read_config_raw(path)
    if raw is None:
        return None, [f"Config file could not be read: {path}"]

    warnings = check_exotic_values(raw)
    for warning in warnings:
        logger.warning("%s (%s)", warning, path)

    try:
        payload = json5.loads(raw)
    except ValueError as error:
        warnings.append(f"Config file could not be parsed: {error}")
        return None, warnings

    if not isinstance(payload, dict):
        warnings.append("Config file does not contain a JSON object")
        return None, warnings

    while True:
        try:
            return OpenClawConfig.model_validate(payload), warnings
        except ValidationError as error:
            dropped = _drop_invalid_values(payload, error)
            invalid_count = error.error_count()
        if not dropped:
            warnings.append(f"Config file has unexpected structure: {invalid_count} invalid field(s)")
            return None, warnings
        for key_path in dropped:
            message = f"Ignoring invalid config value at {key_path}"
            logger.warning("%s (%s)", message, path)
            warnings.append(message)
