from __future__ import annotations

import json

from openclaw_audit.checks.base import CheckContext, read_text
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, FixType, Severity
from openclaw_audit.models.openclaw import ChannelConfig, OpenClawConfig

CATEGORY = "Identity & Access"

SHARED_DM_SCOPES = {"main", "shared", "global"}
MAX_PAIRING_TTL_S = 30 * 24 * 60 * 60
ROTATION_KEYS = ("expiresAt", "expires_at", "rotatedAt", "rotated_at", "expiry", "validUntil")


def _channel_findings(name: str, channel: ChannelConfig, config_path: str | None) -> list[Finding]:
    findings: list[Finding] = []

    if (channel.dm_policy or "").lower() == "open":
        findings.append(
            Finding(
                id="IDENTITY-001",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title=f"Open DM policy on {name}",
                description=f'channels.{name}.dmPolicy is "open" so anyone can message the agent directly',
                risk="Strangers can issue instructions to your agent and trigger its tools",
                remediation=f'Set channels.{name}.dmPolicy to "pairing" or "allowlist"',
                auto_fixable=True,
                fix_type=FixType.BEHAVIORAL,
                file=config_path,
            )
        )

    if channel.allow_from and "*" in channel.allow_from:
        findings.append(
            Finding(
                id="IDENTITY-002",
                severity=Severity.HIGH,
                category=CATEGORY,
                title=f"Wildcard allowFrom on {name}",
                description=f'channels.{name}.allowFrom contains "*"',
                risk="The allowlist admits every sender, defeating its purpose",
                remediation=f"Replace the wildcard in channels.{name}.allowFrom with explicit user ids",
                file=config_path,
            )
        )

    group_policy = (channel.group_policy or "").lower()
    if group_policy == "open":
        findings.append(
            Finding(
                id="IDENTITY-003",
                severity=Severity.HIGH,
                category=CATEGORY,
                title=f"Open group policy on {name}",
                description=f'channels.{name}.groupPolicy is "open" so the agent answers in any group',
                risk="Anyone who adds the agent to a group can interact with it",
                remediation=f'Set channels.{name}.groupPolicy to "allowlist"',
                file=config_path,
            )
        )

    if (channel.dm_scope or "").lower() in SHARED_DM_SCOPES:
        findings.append(
            Finding(
                id="IDENTITY-004",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title=f"Direct messages share one session on {name}",
                description=f'channels.{name}.dmScope is "{channel.dm_scope}"',
                risk="Context from one sender's conversation can leak into another's",
                remediation=f'Set channels.{name}.dmScope to "per-peer"',
                file=config_path,
            )
        )

    if channel.require_mention is False:
        findings.append(
            Finding(
                id="IDENTITY-005",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title=f"Mention not required in groups on {name}",
                description=f"channels.{name}.requireMention is false",
                risk="The agent reacts to every group message, including injected instructions",
                remediation=f"Set channels.{name}.requireMention to true",
                auto_fixable=True,
                fix_type=FixType.BEHAVIORAL,
                file=config_path,
            )
        )

    if group_policy and group_policy != "disabled" and channel.require_mention is None and not channel.mention_patterns:
        findings.append(
            Finding(
                id="IDENTITY-006",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title=f"No mention patterns configured on {name}",
                description=f"Groups are enabled on {name} without requireMention or mentionPatterns",
                risk="Without a mention trigger the agent may respond to unrelated group chatter",
                remediation=f"Configure channels.{name}.mentionPatterns or set requireMention to true",
                file=config_path,
            )
        )

    if channel.group_allow_from and "*" in channel.group_allow_from:
        findings.append(
            Finding(
                id="IDENTITY-010",
                severity=Severity.HIGH,
                category=CATEGORY,
                title=f"Wildcard groupAllowFrom on {name}",
                description=f'channels.{name}.groupAllowFrom contains "*"',
                risk="Every group member can instruct the agent",
                remediation=f"Replace the wildcard in channels.{name}.groupAllowFrom with explicit ids",
                file=config_path,
            )
        )

    return findings


def _has_rotation_metadata(path: str) -> bool:
    text = read_text(path)
    if text is None:
        return False
    try:
        payload = json.loads(text)
    except ValueError:
        return False
    if not isinstance(payload, dict):
        return False
    return any(key in payload for key in ROTATION_KEYS)


def check_identity(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    findings: list[Finding] = []

    for name, channel in (config.channels or {}).items():
        findings.extend(_channel_findings(name, channel, files.config_path))

    store_ttl = config.pairing.store_ttl if config.pairing else None
    if store_ttl is not None and store_ttl > MAX_PAIRING_TTL_S:
        findings.append(
            Finding(
                id="IDENTITY-007",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Pairing codes live too long",
                description=f"pairing.storeTTL is {store_ttl:g}s (more than 30 days)",
                risk="Leaked pairing codes stay usable long enough to be abused",
                remediation="Lower pairing.storeTTL to a few hours",
                file=files.config_path,
            )
        )

    if config.commands is not None and config.commands.use_access_groups is False:
        findings.append(
            Finding(
                id="IDENTITY-008",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title="Command access groups disabled",
                description="commands.useAccessGroups is explicitly false",
                risk="Every sender can run privileged slash commands",
                remediation="Set commands.useAccessGroups to true and assign command roles",
                file=files.config_path,
            )
        )

    if config.identity_links:
        findings.append(
            Finding(
                id="IDENTITY-009",
                severity=Severity.LOW,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Cross-channel identity links configured",
                description=f"{len(config.identity_links)} identity link(s) merge users across channels",
                risk="A compromised account on one channel inherits trust on every linked channel",
                remediation="Review identityLinks and keep only links you have verified",
                file=files.config_path,
            )
        )

    unrotated = [path for path in files.credential_files if not _has_rotation_metadata(path)]
    if unrotated:
        findings.append(
            Finding(
                id="IDENTITY-013",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No credential rotation evidence",
                description=f"{len(unrotated)} credential file(s) carry no expiry or rotation metadata",
                risk="Long-lived channel credentials widen the window for misuse after a leak",
                remediation="Rotate channel credentials periodically and record when they expire",
            )
        )

    return findings
