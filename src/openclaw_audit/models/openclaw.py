"""Loosely typed model of ``openclaw.json``.

Every section accepts unknown keys. Optional booleans stay ``None`` when absent
so checks can tell "not configured" apart from "explicitly disabled".
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _as_string_list(value: Any) -> Any:
    # Chat ids are often written as numbers and single entries as bare strings.
    if isinstance(value, (str, int, float)):
        value = [value]
    if isinstance(value, list):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return value


StringList = Annotated[list[str] | None, BeforeValidator(_as_string_list)]


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class GatewayAuth(_Section):
    mode: str | None = None
    token: str | None = None


class GatewayConfig(_Section):
    bind: str | None = None
    port: int | None = None
    auth: GatewayAuth | None = None
    trusted_proxies: StringList = Field(default=None, alias="trustedProxies")
    allow_insecure_auth: bool | None = Field(default=None, alias="allowInsecureAuth")
    dangerously_disable_device_auth: bool | None = Field(
        default=None, alias="dangerouslyDisableDeviceAuth"
    )


class ChannelConfig(_Section):
    dm_policy: str | None = Field(default=None, alias="dmPolicy")
    allow_from: StringList = Field(default=None, alias="allowFrom")
    group_policy: str | None = Field(default=None, alias="groupPolicy")
    group_allow_from: StringList = Field(default=None, alias="groupAllowFrom")
    require_mention: bool | None = Field(default=None, alias="requireMention")
    mention_patterns: StringList = Field(default=None, alias="mentionPatterns")
    dm_scope: str | None = Field(default=None, alias="dmScope")
    accounts: Any = None


class DockerConfig(_Section):
    network: str | None = None
    socket_mounted: bool | None = Field(default=None, alias="socketMounted")


class BrowserConfig(_Section):
    allow_host_control: bool | None = Field(default=None, alias="allowHostControl")


class SandboxConfig(_Section):
    mode: str | None = None
    scope: str | None = None
    workspace_access: str | None = Field(default=None, alias="workspaceAccess")
    docker: DockerConfig | None = None
    browser: BrowserConfig | None = None


class ToolsConfig(_Section):
    elevated: StringList = None
    use_access_groups: bool | None = Field(default=None, alias="useAccessGroups")
    allowlist: StringList = None
    timeout: float | None = None
    rate_limit: float | None = Field(default=None, alias="rateLimit")
    audit_log: bool | None = Field(default=None, alias="auditLog")


class RetentionConfig(_Section):
    session_log_ttl: float | None = Field(default=None, alias="sessionLogTTL")
    encrypt_at_rest: bool | None = Field(default=None, alias="encryptAtRest")
    log_rotation: bool | None = Field(default=None, alias="logRotation")


class MonitoringConfig(_Section):
    enabled: bool | None = None
    provider: str | None = None


class SkillsConfig(_Section):
    auto_update: bool | None = Field(default=None, alias="autoUpdate")
    verify_signatures: bool | None = Field(default=None, alias="verifySignatures")
    sandboxed: bool | None = None


class PairingConfig(_Section):
    store_ttl: float | None = Field(default=None, alias="storeTTL")


class ModelConfig(_Section):
    default: str | None = None
    fallback_order: StringList = Field(default=None, alias="fallbackOrder")


class ToggleConfig(_Section):
    enabled: bool | None = None


class CommandsConfig(_Section):
    use_access_groups: bool | None = Field(default=None, alias="useAccessGroups")


class OpenClawConfig(_Section):
    gateway: GatewayConfig | None = None
    channels: dict[str, ChannelConfig] | None = None
    sandbox: SandboxConfig | None = None
    tools: ToolsConfig | None = None
    retention: RetentionConfig | None = None
    monitoring: MonitoringConfig | None = None
    skills: SkillsConfig | None = None
    pairing: PairingConfig | None = None
    model: ModelConfig | None = None
    reasoning: ToggleConfig | None = None
    verbose: ToggleConfig | None = None
    commands: CommandsConfig | None = None
    identity_links: list[Any] | None = Field(default=None, alias="identityLinks")
    agents: Any = None

    def agent_list(self) -> list[Any]:
        return self.agents if isinstance(self.agents, list) else []

    def to_text(self) -> str:
        """Serialized form used by checks that search across every key."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
