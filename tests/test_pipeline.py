from __future__ import annotations

import sys
from pathlib import Path

import pytest
from conftest import Installation, ids_of, make_finding

from openclaw_audit.analyzers import pipeline as pipeline_module
from openclaw_audit.analyzers.pipeline import run_scan, scan_installation
from openclaw_audit.errors import InstallationNotFoundError
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Severity


@pytest.fixture(autouse=True)
def fixed_version(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(pipeline_module, "detect_version", lambda: "2026.1.5")


def _all_findings(result) -> list:
    return [*result.findings, *result.suggestions]


def test_exposed_gateway_caps_score(installation: Installation) -> None:
    installation.write_config({"gateway": {"bind": "0.0.0.0"}})

    result, warnings = scan_installation(path=installation.root)

    assert warnings == []
    assert "NETWORK-001" in ids_of(result.findings)
    assert result.score <= 40
    assert result.tool_version == "2026.1.5"
    assert result.platform == sys.platform


def test_empty_config_has_no_serious_findings(installation: Installation) -> None:
    installation.write_config({})

    result, _ = scan_installation(path=installation.root)

    severities = {item.severity for item in _all_findings(result)}
    assert Severity.CRITICAL not in severities
    assert Severity.HIGH not in severities
    assert result.score >= 80
    assert (result.score == 100) == (not result.findings)
    assert result.files_scanned == 1
    assert all(item.confidence != "low" for item in result.findings)
    assert all(item.confidence == "low" for item in result.suggestions)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_loose_credential_files_are_aggregated(installation: Installation) -> None:
    installation.write_config({})
    for name in ("a.json", "b.json", "c.json"):
        installation.write(f"credentials/{name}", "{}", mode=0o644)

    result, _ = scan_installation(path=installation.root)

    loose = [item for item in result.findings if item.id == "SECRET-005"]
    assert len(loose) == 1
    assert loose[0].description == "Credential file has loose permissions (3 occurrences in: a.json, b.json, c.json)"
    assert loose[0].file == str(installation.root / "credentials" / "a.json")
    assert "IDENTITY-013" in ids_of(result.suggestions)


def test_missing_config_is_reported_as_warning(installation: Installation) -> None:
    result, warnings = scan_installation(path=installation.root)

    assert warnings == ["openclaw.json not found; config-based checks were skipped"]
    assert not any(item.category == "Network Exposure" for item in _all_findings(result))


def test_unparseable_config_is_not_treated_as_empty(installation: Installation) -> None:
    installation.write_config("{ this is not json")

    result, warnings = scan_installation(path=installation.root)

    assert warnings[-1] == "openclaw.json could not be parsed; config-based checks were skipped"
    assert any(warning.startswith("Config file could not be parsed") for warning in warnings)
    assert not any(item.id.startswith("TOOLS-") for item in _all_findings(result))


def test_mistyped_field_does_not_hide_exposed_gateway(installation: Installation) -> None:
    installation.write_config(
        {
            "gateway": {"bind": "0.0.0.0", "trustedProxies": "10.0.0.1"},
            "channels": {"telegram": {"dmPolicy": "open", "allowFrom": [123456789]}},
        }
    )

    result, warnings = scan_installation(path=installation.root)

    assert warnings == []
    assert "NETWORK-001" in ids_of(result.findings)
    assert "IDENTITY-001" in ids_of(result.findings)
    assert result.score <= 40


def test_invalid_section_is_dropped_with_warning(installation: Installation) -> None:
    installation.write_config({"gateway": {"bind": "0.0.0.0", "port": "abc"}, "tools": "everything"})

    result, warnings = scan_installation(path=installation.root)

    assert "Ignoring invalid config value at gateway.port" in warnings
    assert "Ignoring invalid config value at tools" in warnings
    assert "NETWORK-001" in ids_of(result.findings)
    assert result.score <= 40


def test_default_workspace_is_scanned(installation: Installation) -> None:
    installation.write_config({})
    installation.write("workspace/TOOLS.md", "token: ghp_" + "a" * 36 + "\n")

    result, _ = scan_installation(path=installation.root)

    finding = next(item for item in result.findings if item.id == "SECRET-009")
    assert finding.severity == Severity.CRITICAL
    assert result.score <= 40


def test_missing_installation_raises(tmp_path: Path) -> None:
    with pytest.raises(InstallationNotFoundError) as excinfo:
        scan_installation(path=tmp_path / "missing")

    assert "--path" in str(excinfo.value)


def test_run_scan_sanitizes_findings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    leaked = make_finding("LEAK-001", description="token sk-ant-" + "x" * 30)
    monkeypatch.setattr(pipeline_module, "run_checks", lambda *_args: [leaked])

    result = run_scan(None, None, DiscoveredFiles(root=str(tmp_path)))

    assert "sk-ant-" not in result.findings[0].description
    assert result.checks_passed == result.checks_run - 1
