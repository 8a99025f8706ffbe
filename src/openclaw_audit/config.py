from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.clawhatch.com"
TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    api_url: str = DEFAULT_API_URL
    upload: bool = False
    deep: bool = False
    workspace: str | None = None


def _load_config_file() -> dict[str, object]:
    candidates = [Path.cwd() / "openclaw-audit.toml", Path.home() / ".config/openclaw-audit/config.toml"]
    for candidate in candidates:
        if not candidate.exists():
            continue
        try:
            return tomllib.loads(candidate.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as error:
            logger.warning("ignoring unreadable settings file %s: %s", candidate, error)
            continue
    return {}


def _read_optional_str(payload: dict[str, object], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _read_bool(env_name: str, payload: dict[str, object], key: str) -> bool:
    env_value = os.getenv(env_name)
    if env_value is not None:
        return env_value.strip().lower() in TRUTHY
    value = payload.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return bool(value)


def load_settings(
    *,
    api_url: str | None = None,
    workspace: str | None = None,
) -> Settings:
    payload: dict[str, object] = _load_config_file()

    return Settings(
        api_url=api_url
        or os.getenv("OPENCLAW_AUDIT_API_URL")
        or _read_optional_str(payload, "api_url")
        or DEFAULT_API_URL,
        upload=_read_bool("OPENCLAW_AUDIT_UPLOAD", payload, "upload"),
        deep=_read_bool("OPENCLAW_AUDIT_DEEP", payload, "deep"),
        workspace=workspace or os.getenv("OPENCLAW_AUDIT_WORKSPACE") or _read_optional_str(payload, "workspace"),
    )
