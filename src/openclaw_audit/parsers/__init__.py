"""Parsers for OpenClaw configuration, environment and session files."""

from openclaw_audit.parsers.config import check_exotic_values, parse_config, read_config_raw
from openclaw_audit.parsers.env import parse_env
from openclaw_audit.parsers.frontmatter import parse_frontmatter
from openclaw_audit.parsers.jsonl import JsonlResult, parse_jsonl

__all__ = [
    "JsonlResult",
    "check_exotic_values",
    "parse_config",
    "parse_env",
    "parse_frontmatter",
    "parse_jsonl",
    "read_config_raw",
]
