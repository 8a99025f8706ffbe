from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from openclaw_audit.checks.base import CheckContext
from openclaw_audit.discovery.finder import discover
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, Severity
from openclaw_audit.models.openclaw import OpenClawConfig


@dataclass
class Installation:
    root: Path
    workspace: Path

    def write(self, relative: str, content: str, *, mode: int | None = None, base: Path | None = None) -> Path:
        path = (base or self.root) / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mode is not None:
            path.chmod(mode)
        return path

    def write_workspace(self, relative: str, content: str, *, mode: int | None = None) -> Path:
        return self.write(relative, content, mode=mode, base=self.workspace)

    def write_config(self, payload: dict[str, Any] | str, *, mode: int = 0o600) -> Path:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        return self.write("openclaw.json", text, mode=mode)

    def discover(self, *, with_workspace: bool = True) -> DiscoveredFiles:
        files, _ = discover(self.root, self.workspace if with_workspace else None)
        return files


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for name in ("OPENCLAW_AUDIT_API_URL", "OPENCLAW_AUDIT_UPLOAD", "OPENCLAW_AUDIT_DEEP", "OPENCLAW_AUDIT_WORKSPACE"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def installation(tmp_path: Path) -> Installation:
    root = tmp_path / "openclaw"
    root.mkdir()
    root.chmod(0o700)
    workspace = tmp_path / "agent-workspace"
    workspace.mkdir()
    return Installation(root=root.resolve(), workspace=workspace.resolve())


@pytest.fixture
def context() -> CheckContext:
    return CheckContext()


def make_finding(
    id: str = "TEST-001",
    severity: Severity = Severity.MEDIUM,
    confidence: Confidence = Confidence.HIGH,
    **overrides: Any,
) -> Finding:
    fields: dict[str, Any] = {
        "category": "Test",
        "title": "Test finding",
        "description": "Test description",
        "risk": "Test risk",
        "remediation": "Test remediation",
    }
    fields.update(overrides)
    return Finding(id=id, severity=severity, confidence=confidence, **fields)


def config_of(payload: dict[str, Any]) -> OpenClawConfig:
    return OpenClawConfig.model_validate(payload)


def ids_of(findings: list[Finding]) -> list[str]:
    return [item.id for item in findings]
