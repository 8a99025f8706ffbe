"""Hardened starting point for a new OpenClaw installation."""

from __future__ import annotations

import json
import logging
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

SECURE_CONFIG = {
    "gateway": {
        "bind": "127.0.0.1",
        "port": 3000,
        "auth": {"mode": "token", "token": "${OPENCLAW_AUTH_TOKEN}"},
        "allowInsecureAuth": False,
        "dangerouslyDisableDeviceAuth": False,
    },
    "channels": {},
    "sandbox": {"mode": "all", "workspaceAccess": "ro"},
    "tools": {"elevated": [], "auditLog": True, "timeout": 30000, "rateLimit": 60},
    "retention": {"sessionLogTTL": 2592000, "encryptAtRest": False, "logRotation": True},
    "skills": {"sandboxed": True, "verifySignatures": False, "autoUpdate": False},
    "model": {"default": "claude-sonnet-4-5-20250929"},
}

ENV_TEMPLATE = """# OpenClaw environment variables
OPENCLAW_AUTH_TOKEN={token}
OPENAI_API_KEY=
ANTHROPIC_API_KEY=
"""

GITIGNORE_TEMPLATE = """.env
.env.*
credentials/
*.key
*.pem
*.p12
agents/*/sessions/
"""

SECRET_FILE_MODE = 0o600
DIRECTORY_MODE = 0o700


@dataclass
class BaselineResult:
    directory: Path
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def baseline_files() -> list[tuple[str, str, int | None]]:
    """Name, content and mode of every file the baseline writes."""
    return [
        ("openclaw.json", json.dumps(SECURE_CONFIG, indent=2) + "\n", SECRET_FILE_MODE),
        (".env", ENV_TEMPLATE.format(token=secrets.token_hex(32)), SECRET_FILE_MODE),
        (".gitignore", GITIGNORE_TEMPLATE, None),
    ]


def write_baseline(target: str | Path) -> BaselineResult:
    """Write the baseline files into ``target``, never replacing an existing file."""
    directory = Path(target).expanduser()
    if not directory.exists():
        directory.mkdir(parents=True, mode=DIRECTORY_MODE)
        os.chmod(directory, DIRECTORY_MODE)

    result = BaselineResult(directory=directory)
    for name, content, mode in baseline_files():
        path = directory / name
        if path.exists():
            logger.info("keeping existing %s", path)
            result.skipped.append(name)
            continue
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL
        with os.fdopen(os.open(path, flags, mode or 0o644), "w", encoding="utf-8") as handle:
            handle.write(content)
        result.created.append(name)
    return result
