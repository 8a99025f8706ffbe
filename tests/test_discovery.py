from __future__ import annotations

from pathlib import Path

import pytest
from conftest import Installation

import openclaw_audit.discovery.finder as finder_module
from openclaw_audit.discovery.finder import discover, is_within_root, locate_root


def test_discover_collects_every_category(installation: Installation) -> None:
    installation.write_config({})
    installation.write(".env", "OPENAI_API_KEY=x\n")
    installation.write("credentials/telegram.json", "{}")
    installation.write("agents/main/auth-profiles.json", "{}")
    installation.write("agents/main/sessions/2024-01-01.jsonl", "{}\n")
    installation.write("skills/weather/SKILL.md", "# Weather\n")
    installation.write("skills/weather/package.json", "{}")
    installation.write_workspace("SOUL.md", "# Soul\n")
    installation.write_workspace("memory/2024-01-01.md", "notes\n")
    installation.write_workspace("skills/local/SKILL.md", "# Local\n")
    installation.write_workspace(".claude/commands/deploy.md", "deploy\n")
    installation.write_workspace("certs/server.pem", "pem\n")
    installation.write_workspace(".ssh/id_rsa", "key\n")

    files, warnings = discover(installation.root, installation.workspace)

    assert warnings == []
    assert files.root == str(installation.root)
    assert files.workspace_root == str(installation.workspace)
    assert files.config_path == str(installation.root / "openclaw.json")
    assert files.env_path == str(installation.root / ".env")
    assert [Path(item).name for item in files.credential_files] == ["telegram.json"]
    assert len(files.auth_profile_files) == 1
    assert len(files.session_log_files) == 1
    assert sorted(Path(item).name for item in files.workspace_markdown_files) == ["2024-01-01.md", "SOUL.md"]
    assert len(files.skill_files) == 2
    assert len(files.skill_package_files) == 1
    assert [Path(item).name for item in files.custom_command_files] == ["deploy.md"]
    assert [Path(item).name for item in files.private_key_files] == ["server.pem"]
    assert [Path(item).name for item in files.ssh_key_files] == ["id_rsa"]
    assert files.file_count() == 14


def test_discover_missing_directories_yield_empty_categories(tmp_path: Path) -> None:
    files, warnings = discover(tmp_path / "missing", tmp_path / "also-missing")

    assert warnings == []
    assert files.config_path is None
    assert files.workspace_root is None
    assert files.file_count() == 0


def test_discover_skips_ignored_directories(installation: Installation) -> None:
    installation.write_workspace("node_modules/pkg/key.pem", "pem\n")
    installation.write_workspace("keys/deploy.key", "key\n")

    files = installation.discover()

    assert [Path(item).name for item in files.private_key_files] == ["deploy.key"]


def test_build_and_dist_directories_are_searched(installation: Installation) -> None:
    installation.write_workspace("build/server.key", "key\n")
    installation.write_workspace("dist/tls.pem", "pem\n")
    installation.write("agents/build/sessions/s.jsonl", "{}\n")

    files = installation.discover()

    assert sorted(Path(item).name for item in files.private_key_files) == ["server.key", "tls.pem"]
    assert files.session_log_files == [str(installation.root / "agents" / "build" / "sessions" / "s.jsonl")]


def test_private_keys_beyond_depth_are_not_collected(installation: Installation) -> None:
    installation.write_workspace("a/b/c/deep.pem", "pem\n")

    files = installation.discover()

    assert files.private_key_files == []


def test_config_symlink_outside_root_is_excluded_with_one_warning(
    installation: Installation, tmp_path: Path
) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    target = outside / "openclaw.json"
    target.write_text('{"gateway": {"bind": "0.0.0.0"}}', encoding="utf-8")
    (installation.root / "openclaw.json").symlink_to(target)

    files, warnings = discover(installation.root)

    assert files.config_path is None
    assert len(warnings) == 1
    assert warnings[0] == (
        f"Symlink: {installation.root / 'openclaw.json'} -> {target.resolve()} (outside OpenClaw directory)"
    )


def test_symlinked_directory_outside_root_is_reported_once(installation: Installation, tmp_path: Path) -> None:
    outside = tmp_path / "shared-creds"
    outside.mkdir()
    for name in ("a.json", "b.json"):
        (outside / name).write_text("{}", encoding="utf-8")
    (installation.root / "credentials").symlink_to(outside, target_is_directory=True)

    files, warnings = discover(installation.root)

    assert files.credential_files == []
    assert len(warnings) == 1
    assert "outside OpenClaw directory" in warnings[0]


def test_symlink_inside_root_is_included(installation: Installation) -> None:
    real = installation.write("configs/real.json", "{}")
    (installation.root / "openclaw.json").symlink_to(real)

    files, warnings = discover(installation.root)

    assert warnings == []
    assert files.config_path == str(installation.root / "openclaw.json")


def test_workspace_symlink_escape_names_workspace(installation: Installation, tmp_path: Path) -> None:
    outside = tmp_path / "elsewhere"
    outside.mkdir()
    (outside / "SOUL.md").write_text("# Soul\n", encoding="utf-8")
    (installation.workspace / "SOUL.md").symlink_to(outside / "SOUL.md")

    files, warnings = discover(installation.root, installation.workspace)

    assert files.workspace_markdown_files == []
    assert warnings == [
        f"Symlink: {installation.workspace / 'SOUL.md'} -> {(outside / 'SOUL.md').resolve()} "
        "(outside workspace directory)"
    ]


def test_is_within_root_requires_component_boundary() -> None:
    assert is_within_root("/home/user/.openclaw", "/home/user/.openclaw")
    assert is_within_root("/home/user/.openclaw/openclaw.json", "/home/user/.openclaw")
    assert not is_within_root("/home/user/.openclaw-evil/openclaw.json", "/home/user/.openclaw")


def test_is_within_root_ignores_case_off_linux(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(finder_module.sys, "platform", "darwin")
    assert is_within_root("/Users/Me/.OpenClaw/openclaw.json", "/users/me/.openclaw")

    monkeypatch.setattr(finder_module.sys, "platform", "linux")
    assert not is_within_root("/Users/Me/.OpenClaw/openclaw.json", "/users/me/.openclaw")


def test_locate_root_custom_path(tmp_path: Path) -> None:
    root = tmp_path / "custom"
    root.mkdir()

    assert locate_root(root) == root
    assert locate_root(tmp_path / "missing") is None


def test_locate_root_defaults_to_home(isolated_home: Path) -> None:
    assert locate_root() is None

    (isolated_home / ".openclaw").mkdir()

    assert locate_root() == isolated_home / ".openclaw"
