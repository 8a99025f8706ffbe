"""Exceptions raised to callers of the scan API."""

from __future__ import annotations

from pathlib import Path


class InstallationNotFoundError(Exception):
    """No readable OpenClaw directory exists at the requested or default locations."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        where = f" at {self.path}" if self.path else ""
        super().__init__(
            f"OpenClaw installation not found{where}. Use --path to point at your OpenClaw directory."
        )
