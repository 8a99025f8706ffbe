from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiscoveryPattern:
    glob: str
    field: str


ROOT_PATTERNS: tuple[DiscoveryPattern, ...] = (
    DiscoveryPattern("openclaw.json", "config_path"),
    DiscoveryPattern(".env", "env_path"),
    DiscoveryPattern("credentials/*.json", "credential_files"),
    DiscoveryPattern("agents/*/auth-profiles.json", "auth_profile_files"),
    DiscoveryPattern("agents/*/sessions/*.jsonl", "session_log_files"),
    DiscoveryPattern("skills/*/SKILL.md", "skill_files"),
    DiscoveryPattern("skills/*/package.json", "skill_package_files"),
)

PRIVATE_KEY_SUFFIXES = ("pem", "key", "p12")
PRIVATE_KEY_MAX_DEPTH = 3

WORKSPACE_PATTERNS: tuple[DiscoveryPattern, ...] = (
    DiscoveryPattern("SOUL.md", "workspace_markdown_files"),
    DiscoveryPattern("AGENTS.md", "workspace_markdown_files"),
    DiscoveryPattern("TOOLS.md", "workspace_markdown_files"),
    DiscoveryPattern("MEMORY.md", "workspace_markdown_files"),
    DiscoveryPattern("memory/*.md", "workspace_markdown_files"),
    DiscoveryPattern("skills/*/SKILL.md", "skill_files"),
    DiscoveryPattern(".claude/commands/*.md", "custom_command_files"),
    DiscoveryPattern("skills/*/package.json", "skill_package_files"),
    *(
        DiscoveryPattern("*/" * depth + f"*.{suffix}", "private_key_files")
        for suffix in PRIVATE_KEY_SUFFIXES
        for depth in range(PRIVATE_KEY_MAX_DEPTH)
    ),
    DiscoveryPattern("id_rsa", "ssh_key_files"),
    DiscoveryPattern("id_ed25519", "ssh_key_files"),
    DiscoveryPattern(".ssh/id_rsa", "ssh_key_files"),
    DiscoveryPattern(".ssh/id_ed25519", "ssh_key_files"),
)

SINGLE_FILE_FIELDS = {"config_path", "env_path"}

IGNORED_DIR_NAMES = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".cache",
}
