from __future__ import annotations

from importlib.metadata import version

from openclaw_audit import __version__


def test_package_version_matches_metadata() -> None:
    assert __version__ == version("openclaw-audit")
