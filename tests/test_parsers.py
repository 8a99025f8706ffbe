from __future__ import annotations

import json
from pathlib import Path

from openclaw_audit.parsers.config import check_exotic_values, parse_config, read_config_raw
from openclaw_audit.parsers.env import parse_env
from openclaw_audit.parsers.frontmatter import parse_frontmatter
from openclaw_audit.parsers.jsonl import MAX_LINES, parse_jsonl
from openclaw_audit.parsers.secrets import count_api_keys, find_secrets


def test_parse_config_accepts_json5(tmp_path: Path) -> None:
    path = tmp_path / "openclaw.json"
    path.write_text(
        """
        // gateway settings
        {
          gateway: { bind: '127.0.0.1', port: 18789, },
          channels: { telegram: { dmPolicy: "pairing" } },
          futureSection: { anything: true },
        }
        """,
        encoding="utf-8",
    )

    config, warnings = parse_config(path)

    assert warnings == []
    assert config is not None
    assert config.gateway is not None
    assert config.gateway.bind == "127.0.0.1"
    assert config.channels is not None
    assert config.channels["telegram"].dm_policy == "pairing"


def test_parse_config_syntax_error_degrades_to_none(tmp_path: Path) -> None:
    path = tmp_path / "openclaw.json"
    path.write_text("{ gateway: ", encoding="utf-8")

    config, warnings = parse_config(path)

    assert config is None
    assert any("could not be parsed" in item for item in warnings)


def test_parse_config_non_object_top_level(tmp_path: Path) -> None:
    path = tmp_path / "openclaw.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    config, warnings = parse_config(path)

    assert config is None
    assert warnings == ["Config file does not contain a JSON object"]


def test_parse_config_drops_only_the_mistyped_section(tmp_path: Path) -> None:
    path = tmp_path / "openclaw.json"
    path.write_text(
        json.dumps({"gateway": "not-an-object", "sandbox": {"mode": "all"}}), encoding="utf-8"
    )

    config, warnings = parse_config(path)

    assert config is not None
    assert config.gateway is None
    assert config.sandbox is not None
    assert config.sandbox.mode == "all"
    assert warnings == ["Ignoring invalid config value at gateway"]


def test_parse_config_coerces_numeric_ids_and_scalar_lists(tmp_path: Path) -> None:
    path = tmp_path / "openclaw.json"
    path.write_text(
        json.dumps(
            {
                "gateway": {"bind": "0.0.0.0", "trustedProxies": "10.0.0.1"},
                "channels": {
                    "telegram": {
                        "dmPolicy": "open",
                        "allowFrom": [123456789, "@owner"],
                        "accounts": {"main": {"token": "x"}},
                    }
                },
            }
        ),
        encoding="utf-8",
    )

    config, warnings = parse_config(path)

    assert warnings == []
    assert config is not None
    assert config.gateway is not None
    assert config.gateway.bind == "0.0.0.0"
    assert config.gateway.trusted_proxies == ["10.0.0.1"]
    assert config.channels is not None
    assert config.channels["telegram"].allow_from == ["123456789", "@owner"]


def test_parse_config_keeps_sibling_fields_of_a_bad_value(tmp_path: Path) -> None:
    path = tmp_path / "openclaw.json"
    path.write_text(
        json.dumps({"gateway": {"bind": "0.0.0.0", "port": "not-a-port", "auth": {"mode": "none"}}}),
        encoding="utf-8",
    )

    config, warnings = parse_config(path)

    assert config is not None
    assert config.gateway is not None
    assert config.gateway.bind == "0.0.0.0"
    assert config.gateway.port is None
    assert config.gateway.auth is not None
    assert config.gateway.auth.mode == "none"
    assert warnings == ["Ignoring invalid config value at gateway.port"]


def test_parse_config_missing_file(tmp_path: Path) -> None:
    config, warnings = parse_config(tmp_path / "missing.json")

    assert config is None
    assert len(warnings) == 1
    assert read_config_raw(tmp_path / "missing.json") is None


def test_exotic_values_are_reported() -> None:
    raw = '{ "a": Infinity, "b": NaN, "c": 0xFF }'

    warnings = check_exotic_values(raw)

    assert len(warnings) == 3
    assert any("Infinity" in item for item in warnings)
    assert any("hexadecimal" in item for item in warnings)
    assert check_exotic_values('{"a": 1}') == []


def test_parse_env_handles_comments_exports_and_quotes(tmp_path: Path) -> None:
    path = tmp_path / ".env"
    path.write_text(
        "# comment\n"
        "\n"
        "PLAIN=value\n"
        "export EXPORTED=1\n"
        'DOUBLE="quoted value"\n'
        "SINGLE='x=y'\n"
        "NOVALUE\n",
        encoding="utf-8",
    )

    values = parse_env(path)

    assert values == {
        "PLAIN": "value",
        "EXPORTED": "1",
        "DOUBLE": "quoted value",
        "SINGLE": "x=y",
    }


def test_parse_env_unreadable_returns_empty(tmp_path: Path) -> None:
    assert parse_env(tmp_path / "missing.env") == {}


def test_parse_jsonl_skips_bad_and_non_object_lines(tmp_path: Path) -> None:
    path = tmp_path / "session.jsonl"
    path.write_text('{"role": "user"}\nnot json\n[1, 2]\n\n{"role": "assistant"}\n', encoding="utf-8")

    result = parse_jsonl(path)

    assert [entry["role"] for entry in result.entries] == ["user", "assistant"]
    assert result.truncated is False
    assert result.total_size_bytes == path.stat().st_size


def test_parse_jsonl_line_limit(tmp_path: Path) -> None:
    path = tmp_path / "session.jsonl"
    path.write_text("".join(f'{{"n": {index}}}\n' for index in range(MAX_LINES + 5)), encoding="utf-8")

    normal = parse_jsonl(path)
    unbounded = parse_jsonl(path, max_lines=None)

    assert normal.truncated is True
    assert len(normal.entries) == MAX_LINES
    assert unbounded.truncated is False
    assert len(unbounded.entries) == MAX_LINES + 5


def test_parse_jsonl_exactly_at_line_limit_is_complete(tmp_path: Path) -> None:
    path = tmp_path / "session.jsonl"
    path.write_text("".join(f'{{"n": {index}}}\n' for index in range(MAX_LINES)), encoding="utf-8")

    result = parse_jsonl(path)

    assert result.truncated is False
    assert len(result.entries) == MAX_LINES


def test_parse_frontmatter() -> None:
    text = "---\nname: deploy\nallowed-tools: Bash, Read\n---\n# Deploy\n"

    assert parse_frontmatter(text) == {"name": "deploy", "allowed-tools": "Bash, Read"}
    assert parse_frontmatter("# No metadata\n") is None
    assert parse_frontmatter("---\n- just\n- a list\n---\n") is None
    assert parse_frontmatter("---\nkey: [unclosed\n---\n") is None


def test_find_secrets_reports_pattern_and_line() -> None:
    text = "# Tools\n\nUse the deploy key.\nOPENAI=sk-abcdefghijklmnopqrstuvwxyz123456\n"

    matches = find_secrets(text)

    assert matches
    assert matches[0].pattern == "OpenAI API key"
    assert matches[0].line == 4
    assert find_secrets("Nothing to see here.\napi_key = ${OPENAI_API_KEY}\n") == []


def test_count_api_keys() -> None:
    raw = json.dumps(
        {
            "a": "sk-" + "a" * 40,
            "b": "AKIA" + "B" * 16,
            "c": "${ENV_VAR}",
        }
    )

    assert count_api_keys(raw) == 2


def test_parse_jsonl_byte_budget(tmp_path: Path) -> None:
    path = tmp_path / "session.jsonl"
    path.write_text('{"n": 1}\n' + '{"n": 2}\n' * 10, encoding="utf-8")

    result = parse_jsonl(path, max_bytes=9, max_lines=None)

    assert result.truncated is True
    assert result.entries == [{"n": 1}]
    assert result.total_size_bytes == path.stat().st_size
