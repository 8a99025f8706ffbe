from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from openclaw_audit.discovery.patterns import (
    IGNORED_DIR_NAMES,
    ROOT_PATTERNS,
    SINGLE_FILE_FIELDS,
    WORKSPACE_PATTERNS,
    DiscoveryPattern,
)
from openclaw_audit.models.files import DiscoveredFiles

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryDiagnostics:
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.info("discovery warning: %s", message)


def _warn_oserror(diagnostics: DiscoveryDiagnostics, context: str, error: OSError | RuntimeError) -> None:
    diagnostics.warn(f"{context}: {error.__class__.__name__}: {error}")


def _case_sensitive_paths() -> bool:
    return sys.platform.startswith("linux")


def is_within_root(path: str | Path, root: str | Path) -> bool:
    """Return True if ``path`` equals ``root`` or lies beneath it.

    Both arguments are expected to be absolute, already-resolved paths. The
    comparison is case-insensitive everywhere but Linux.
    """
    candidate = str(path)
    base = str(root).rstrip(os.sep) or os.sep
    if not _case_sensitive_paths():
        candidate = candidate.lower()
        base = base.lower()
    if candidate == base:
        return True
    prefix = base if base.endswith(os.sep) else base + os.sep
    return candidate.startswith(prefix)


def default_locations() -> list[Path]:
    home = Path.home()
    candidates = [home / ".openclaw"]
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            candidates.append(Path(appdata) / "openclaw")
        candidates.append(home / "AppData" / "Roaming" / "openclaw")
    return candidates


def _is_readable(path: Path) -> bool:
    try:
        return path.exists() and os.access(path, os.R_OK)
    except OSError:
        return False


def locate_root(custom_path: str | Path | None = None) -> Path | None:
    """Find the OpenClaw installation directory.

    A custom path is the only candidate when given; otherwise the platform
    defaults are tried in order. Returns None when nothing readable exists.
    """
    if custom_path:
        candidate = Path(custom_path).expanduser()
        if _is_readable(candidate):
            return candidate
        logger.info("custom installation path is not readable: %s", candidate)
        return None

    for candidate in default_locations():
        if _is_readable(candidate):
            return candidate
    logger.info("no OpenClaw installation found in default locations")
    return None


def _canonical(path: Path) -> Path:
    expanded = path.expanduser()
    try:
        return expanded.resolve()
    except (OSError, RuntimeError):
        return expanded.absolute()


def _iter_matches(root: Path, pattern: str, diagnostics: DiscoveryDiagnostics) -> list[Path]:
    matches: list[Path] = []
    context = f"failed scanning pattern '{pattern}' under '{root}'"
    try:
        iterator = root.glob(pattern)
    except OSError as error:
        _warn_oserror(diagnostics, context, error)
        return matches

    while True:
        try:
            path = next(iterator)
        except StopIteration:
            break
        except OSError as error:
            _warn_oserror(diagnostics, context, error)
            break
        matches.append(path)
    return sorted(matches, key=lambda item: str(item))


def _escaping_link(base_dir: Path, parts: tuple[str, ...]) -> tuple[Path, Path] | None:
    current = base_dir
    for part in parts:
        current = current / part
        if not current.is_symlink():
            continue
        target = current.resolve()
        if not is_within_root(target, base_dir):
            return current, target
    return None


class _BoundaryGuard:
    """Admits glob matches that stay inside one trusted directory."""

    def __init__(self, base_dir: Path, label: str, diagnostics: DiscoveryDiagnostics) -> None:
        self.base_dir = base_dir
        self.label = label
        self.diagnostics = diagnostics
        self._reported: set[str] = set()

    def _report(self, link: Path, target: Path) -> None:
        key = str(link)
        if key in self._reported:
            return
        self._reported.add(key)
        self.diagnostics.warn(f"Symlink: {link} -> {target} (outside {self.label} directory)")

    def admit(self, match: Path) -> bool:
        try:
            rel = match.relative_to(self.base_dir)
        except ValueError:
            return False
        if any(part in IGNORED_DIR_NAMES for part in rel.parts[:-1]):
            return False

        try:
            escape = _escaping_link(self.base_dir, rel.parts)
            if escape is not None:
                self._report(*escape)
                return False
            resolved = match.resolve()
            if not is_within_root(resolved, self.base_dir):
                self._report(match, resolved)
                return False
            return match.is_file()
        except (OSError, RuntimeError) as error:
            _warn_oserror(self.diagnostics, f"failed inspecting discovered path '{match}'", error)
            return False


def _collect(
    base_dir: Path,
    patterns: tuple[DiscoveryPattern, ...],
    guard: _BoundaryGuard,
    collected: dict[str, list[str]],
    diagnostics: DiscoveryDiagnostics,
) -> None:
    for pattern in patterns:
        for match in _iter_matches(base_dir, pattern.glob, diagnostics):
            if not guard.admit(match):
                continue
            bucket = collected.setdefault(pattern.field, [])
            value = str(match)
            if value not in bucket:
                bucket.append(value)


def discover(
    root: str | Path,
    workspace_root: str | Path | None = None,
) -> tuple[DiscoveredFiles, list[str]]:
    """Enumerate scannable files under ``root`` and the optional workspace.

    Never raises. Paths that escape their trusted directory through a symlink
    are left out and reported once each in the returned warnings.
    """
    diagnostics = DiscoveryDiagnostics()
    canonical_root = _canonical(Path(root))
    collected: dict[str, list[str]] = {}

    if canonical_root.is_dir():
        root_guard = _BoundaryGuard(canonical_root, "OpenClaw", diagnostics)
        _collect(canonical_root, ROOT_PATTERNS, root_guard, collected, diagnostics)
    else:
        logger.info("installation directory not found: %s", canonical_root)

    workspace_guard: _BoundaryGuard | None = None
    if workspace_root is not None:
        canonical_workspace = _canonical(Path(workspace_root))
        if canonical_workspace.is_dir():
            workspace_guard = _BoundaryGuard(canonical_workspace, "workspace", diagnostics)
            _collect(canonical_workspace, WORKSPACE_PATTERNS, workspace_guard, collected, diagnostics)
        else:
            logger.info("workspace directory not found: %s", canonical_workspace)

    singles = {name: (collected.pop(name, None) or [None])[0] for name in SINGLE_FILE_FIELDS}
    if singles["config_path"] is None:
        logger.info("openclaw.json not found under %s", canonical_root)
    if singles["env_path"] is None:
        logger.info(".env not found under %s", canonical_root)

    files = DiscoveredFiles(
        root=str(canonical_root),
        workspace_root=str(workspace_guard.base_dir) if workspace_guard is not None else None,
        **singles,
        **collected,
    )
    logger.info(
        "discovered %s file(s) under %s (warnings=%s)",
        files.file_count(),
        canonical_root,
        len(diagnostics.warnings),
    )
    return files, diagnostics.warnings
