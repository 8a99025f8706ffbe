from __future__ import annotations

import json
import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from openclaw_audit.utils.capped import DEFAULT_MAX_BYTES, read_capped

logger = logging.getLogger(__name__)

SAMPLE_BYTES = 512 * 1024
SUBPROCESS_TIMEOUT_S = 5


@dataclass(frozen=True)
class CheckContext:
    raw_config: str | None = None
    deep: bool = False


def read_text(path: str | Path, max_bytes: int = DEFAULT_MAX_BYTES) -> str | None:
    try:
        content, _ = read_capped(path, max_bytes)
    except OSError as error:
        logger.debug("skipping unreadable file '%s': %s", path, error)
        return None
    return content


def read_sample(path: str | Path) -> str | None:
    return read_text(path, SAMPLE_BYTES)


def file_mode(path: str | Path) -> int | None:
    try:
        return Path(path).stat().st_mode & 0o777
    except OSError as error:
        logger.debug("failed to stat '%s': %s", path, error)
        return None


def file_size(path: str | Path) -> int | None:
    try:
        return Path(path).stat().st_size
    except OSError:
        return None


def load_package(path: str | Path) -> dict[str, Any] | None:
    text = read_text(path)
    if text is None:
        return None
    try:
        payload = json.loads(text)
    except ValueError:
        logger.debug("skipping malformed package manifest '%s'", path)
        return None
    return payload if isinstance(payload, dict) else None


def package_dependencies(package: dict[str, Any]) -> dict[str, str]:
    merged: dict[str, str] = {}
    for key in ("dependencies", "devDependencies"):
        section = package.get(key)
        if isinstance(section, dict):
            merged.update({str(name): str(spec) for name, spec in section.items()})
    return merged


def run_git(args: list[str], cwd: str | Path) -> str | None:
    """Run a read-only git command; None when git is missing, fails or times out."""
    executable = shutil.which("git")
    if executable is None:
        return None
    try:
        completed = subprocess.run(
            [executable, *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=SUBPROCESS_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as error:
        logger.debug("git %s failed in '%s': %s", " ".join(args), cwd, error)
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout


def name_of(path: str | Path) -> str:
    return Path(path).name


def first_names(paths: list[str], limit: int = 3) -> str:
    return ", ".join(name_of(item) for item in paths[:limit])
