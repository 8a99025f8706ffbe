from __future__ import annotations

import sys
from pathlib import Path

from openclaw_audit.checks.base import CheckContext
from openclaw_audit.discovery.finder import is_within_root
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Finding, Severity
from openclaw_audit.models.openclaw import OpenClawConfig

CATEGORY = "Cloud Sync"


def sync_folders(home: Path) -> list[tuple[str, Path]]:
    """Known sync-client folders for the current platform, whether or not they exist."""
    folders = [
        ("OneDrive", home / "OneDrive"),
        ("Dropbox", home / "Dropbox"),
        ("Google Drive", home / "Google Drive"),
    ]
    if sys.platform == "darwin":
        folders.insert(2, ("iCloud Drive", home / "Library" / "Mobile Documents" / "com~apple~CloudDocs"))
    return folders


def _within(path: str, folder: Path) -> bool:
    return is_within_root(path.lower(), str(folder).lower())


def check_cloud_sync(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    if not files.root:
        return []
    findings: list[Finding] = []
    for service, folder in sync_folders(Path.home()):
        if _within(files.root, folder):
            findings.append(
                Finding(
                    id="CLOUD-001",
                    severity=Severity.HIGH,
                    category=CATEGORY,
                    title=f"OpenClaw directory is inside {service}",
                    description=f"{files.root} is synced by {service}",
                    risk="Credentials, session logs and config are copied to cloud storage and other devices",
                    remediation=f"Move the OpenClaw directory out of {folder} or exclude it from sync",
                    file=files.root,
                )
            )
    return findings
