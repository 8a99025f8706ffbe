from __future__ import annotations

from pydantic import BaseModel, Field


class DiscoveredFiles(BaseModel):
    root: str
    workspace_root: str | None = None
    config_path: str | None = None
    env_path: str | None = None
    credential_files: list[str] = Field(default_factory=list)
    auth_profile_files: list[str] = Field(default_factory=list)
    session_log_files: list[str] = Field(default_factory=list)
    workspace_markdown_files: list[str] = Field(default_factory=list)
    skill_files: list[str] = Field(default_factory=list)
    custom_command_files: list[str] = Field(default_factory=list)
    skill_package_files: list[str] = Field(default_factory=list)
    private_key_files: list[str] = Field(default_factory=list)
    ssh_key_files: list[str] = Field(default_factory=list)

    def file_count(self) -> int:
        singles = sum(1 for item in (self.config_path, self.env_path) if item)
        lists = (
            self.credential_files,
            self.auth_profile_files,
            self.session_log_files,
            self.workspace_markdown_files,
            self.skill_files,
            self.custom_command_files,
            self.skill_package_files,
            self.private_key_files,
            self.ssh_key_files,
        )
        return singles + sum(len(items) for items in lists)
