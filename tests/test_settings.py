from __future__ import annotations

from pathlib import Path

import pytest

from openclaw_audit.config import DEFAULT_API_URL, load_settings


def test_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.api_url == DEFAULT_API_URL
    assert settings.upload is False
    assert settings.deep is False
    assert settings.workspace is None


def test_project_file_then_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "openclaw-audit.toml").write_text(
        'api_url = "https://reports.example.test"\nupload = true\nworkspace = "/srv/agent"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("OPENCLAW_AUDIT_UPLOAD", "no")
    monkeypatch.setenv("OPENCLAW_AUDIT_DEEP", "1")

    settings = load_settings()

    assert settings.api_url == "https://reports.example.test"
    assert settings.upload is False
    assert settings.deep is True
    assert settings.workspace == "/srv/agent"


def test_user_config_file(tmp_path: Path, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    user_config = isolated_home / ".config" / "openclaw-audit" / "config.toml"
    user_config.parent.mkdir(parents=True)
    user_config.write_text('deep = "yes"\n', encoding="utf-8")

    assert load_settings().deep is True


def test_explicit_arguments_win(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENCLAW_AUDIT_API_URL", "https://env.example.test")
    monkeypatch.setenv("OPENCLAW_AUDIT_WORKSPACE", "/env/workspace")

    settings = load_settings(api_url="https://cli.example.test", workspace="/cli/workspace")

    assert settings.api_url == "https://cli.example.test"
    assert settings.workspace == "/cli/workspace"


def test_broken_settings_file_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "openclaw-audit.toml").write_text("upload = [", encoding="utf-8")

    assert load_settings().upload is False
