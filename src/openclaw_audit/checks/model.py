from __future__ import annotations

import json
import re

from openclaw_audit.checks.base import CheckContext, read_text
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, Severity
from openclaw_audit.models.openclaw import OpenClawConfig

CATEGORY = "Model Security"

LEGACY_MODELS = ("gpt-3.5", "gpt-3.5-turbo", "text-davinci", "claude-instant", "claude-1")
WEAK_TOOL_MODELS = (
    "haiku",
    "claude-haiku",
    "claude-3-haiku",
    "gpt-3.5-turbo",
    "gpt-4o-mini",
    "gemini-flash",
    "gemini-1.0",
)
INJECTION_RESISTANCE_KEYWORDS = (
    "do not follow",
    "ignore previous",
    "never override",
    "reject instruction",
    "system prompt",
    "injection",
    "unauthorized",
    "do not comply",
    "refuse to",
    "override",
    "safety",
    "boundaries",
)
SANITIZATION_KEYWORDS = ("sanitize", "validate", "filter", "escape", "untrusted input", "user input")
SECURITY_HEADER_RE = re.compile(r"^#+\s*(?:security|safety|boundaries|trust|restrictions)", re.MULTILINE)
VERSION_RE = re.compile(r"version|v\d+\.\d+|changelog|revision", re.IGNORECASE)
SENSITIVE_PROMPT_PATTERNS = (
    re.compile(r"\b(?:password|passwd)\s*[=:]\s*\S+", re.IGNORECASE),
    re.compile(r"\bapi[_-]?key\s*[=:]\s*\S+", re.IGNORECASE),
    re.compile(r"\bsecret\s*[=:]\s*\S+", re.IGNORECASE),
    re.compile(r"\btoken\s*[=:]\s*[a-zA-Z0-9]{20,}", re.IGNORECASE),
)
TEMPERATURE_RE = re.compile(r'"temperature"\s*:\s*([0-9.]+)')
EXTERNAL_GROUP_POLICIES = {"open", "allowlist"}


def _is_weak(model: str) -> bool:
    lowered = model.lower()
    return any(marker in lowered for marker in WEAK_TOOL_MODELS)


def _soul_path(files: DiscoveredFiles) -> str | None:
    for path in files.workspace_markdown_files:
        if path.replace("\\", "/").rsplit("/", 1)[-1].upper() == "SOUL.MD":
            return path
    return None


def _soul_findings(path: str) -> list[Finding]:
    content = read_text(path)
    if content is None:
        return []
    lower = content.lower()
    findings: list[Finding] = []

    if not any(keyword in lower for keyword in INJECTION_RESISTANCE_KEYWORDS):
        findings.append(
            Finding(
                id="MODEL-003",
                severity=Severity.MEDIUM,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No injection resistance in SOUL.md",
                description="SOUL.md does not appear to contain injection-resistance instructions",
                risk="The agent is more susceptible to prompt injection via messages or fetched content",
                remediation="Tell the agent in SOUL.md never to follow instructions that override its core directives",
                file=path,
            )
        )

    if not SECURITY_HEADER_RE.search(lower):
        findings.append(
            Finding(
                id="MODEL-008",
                severity=Severity.MEDIUM,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No security boundaries section in SOUL.md",
                description="SOUL.md lacks a Security, Safety or Boundaries section header",
                risk="Safety instructions may be scattered or missing",
                remediation="Add a ## Security Boundaries section to SOUL.md with explicit safety rules",
                file=path,
            )
        )

    if any(pattern.search(content) for pattern in SENSITIVE_PROMPT_PATTERNS):
        findings.append(
            Finding(
                id="MODEL-009",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="SOUL.md contains sensitive data",
                description="The system prompt appears to contain passwords, API keys or tokens",
                risk="Sensitive data in system prompts can be extracted via prompt injection",
                remediation="Remove all secrets from SOUL.md and use environment variables instead",
                file=path,
            )
        )

    if not VERSION_RE.search(content):
        findings.append(
            Finding(
                id="MODEL-010",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No prompt versioning",
                description="SOUL.md has no version number or changelog information",
                risk="Prompt changes cannot be tracked or rolled back",
                remediation="Add a version header to SOUL.md (e.g. <!-- Version: 1.0.0 -->)",
                file=path,
            )
        )

    if not any(keyword in lower for keyword in SANITIZATION_KEYWORDS):
        findings.append(
            Finding(
                id="MODEL-011",
                severity=Severity.MEDIUM,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No input sanitization guidance",
                description="SOUL.md does not mention sanitizing, validating or filtering user input",
                risk="The agent may act on untrusted input without validation",
                remediation="Add instructions to SOUL.md about validating user-provided data",
                file=path,
            )
        )
    return findings


def _group_findings(config: OpenClawConfig) -> list[Finding]:
    channels = list((config.channels or {}).values())
    has_groups = any(channel.group_policy is not None for channel in channels)
    has_open_dm = any((channel.dm_policy or "").lower() == "open" for channel in channels)
    findings: list[Finding] = []

    if has_groups and not (config.reasoning and config.reasoning.enabled is False):
        findings.append(
            Finding(
                id="MODEL-004",
                severity=Severity.LOW,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Reasoning enabled in group contexts",
                description="Extended reasoning is not disabled for group conversations",
                risk="Reasoning output may reveal internal logic to group members",
                remediation="Set reasoning.enabled to false for group contexts",
            )
        )

    if has_groups and not (config.verbose and config.verbose.enabled is False):
        findings.append(
            Finding(
                id="MODEL-005",
                severity=Severity.LOW,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Verbose mode enabled in group contexts",
                description="Verbose output is not disabled for group conversations",
                risk="Verbose output may reveal tool calls or file contents to group members",
                remediation="Set verbose.enabled to false for group contexts",
            )
        )

    if has_groups and has_open_dm:
        findings.append(
            Finding(
                id="MODEL-014",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Context window abuse risk",
                description="An open DM policy alongside group contexts makes context flooding easier",
                risk="Attackers can flood the context with content that steers the agent",
                remediation="Restrict DM policies and set message length and frequency limits",
            )
        )
    return findings


def _agent_findings(config: OpenClawConfig) -> list[Finding]:
    agents = config.agent_list()
    if len(agents) <= 1:
        return []
    serialized = json.dumps(agents, default=str)
    findings: list[Finding] = []

    if not any(marker in serialized for marker in ("privilege", "role", "restricted")):
        findings.append(
            Finding(
                id="MODEL-007",
                severity=Severity.MEDIUM,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Multi-agent setup without privilege separation",
                description=f"{len(agents)} agents configured without apparent privilege separation",
                risk="Agents handling untrusted input should have fewer privileges than the main agent",
                remediation="Give each agent a role and restrict tools for agents handling external input",
            )
        )

    lowered = serialized.lower()
    if not any(marker in lowered for marker in ("trust", "boundary", "isolated")):
        findings.append(
            Finding(
                id="MODEL-015",
                severity=Severity.MEDIUM,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No trust boundaries between agents",
                description=f"{len(agents)} agents configured without explicit trust boundaries",
                risk="A compromised agent can influence every other agent",
                remediation="Define explicit trust boundaries and communication rules between agents",
            )
        )
    return findings


def check_model(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    findings: list[Finding] = []
    model = (config.model.default if config.model else None) or ""

    if any(marker in model.lower() for marker in LEGACY_MODELS):
        findings.append(
            Finding(
                id="MODEL-001",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title="Legacy model configured",
                description=f'Default model "{model}" is a legacy model with weaker safety training',
                risk="Older models are more susceptible to prompt injection and jailbreaks",
                remediation="Upgrade to a current-generation model",
                file=files.config_path,
            )
        )

    if _is_weak(model):
        findings.append(
            Finding(
                id="MODEL-002",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title="Weak model used with tool access",
                description=f'Model "{model}" has limited reasoning capability for safe tool use',
                risk="Smaller models are more likely to run dangerous tool calls without judgment",
                remediation="Use a stronger model for agents with tool access",
                file=files.config_path,
            )
        )

    soul = _soul_path(files)
    if soul is not None:
        findings.extend(_soul_findings(soul))

    findings.extend(_group_findings(config))

    fallback = (config.model.fallback_order if config.model else None) or []
    weak_fallback = [name for name in fallback if _is_weak(name)]
    if weak_fallback:
        findings.append(
            Finding(
                id="MODEL-006",
                severity=Severity.LOW,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Weak model(s) in fallback order",
                description=f"Fallback order includes weak model(s): {', '.join(weak_fallback)}",
                risk="A failing primary model hands tool access to a weaker model",
                remediation="Use capable models in the fallback order or restrict tools for weak fallbacks",
                file=files.config_path,
            )
        )

    findings.extend(_agent_findings(config))

    config_text = config.to_text().lower()
    temperature = TEMPERATURE_RE.search(config_text)
    if temperature:
        try:
            value = float(temperature.group(1))
        except ValueError:
            value = None
        if value is not None and value > 1.0:
            findings.append(
                Finding(
                    id="MODEL-012",
                    severity=Severity.LOW,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Model temperature is high",
                    description=f"Temperature set to {value} (above 1.0) increases output randomness",
                    risk="High temperature raises the chance of hallucinated tool calls",
                    remediation="Use a temperature of 1.0 or lower for agents with tool access",
                    file=files.config_path,
                )
            )

    has_elevated = bool(config.tools and config.tools.elevated)
    has_external = any(
        (channel.dm_policy or "").lower() == "open"
        or (channel.group_policy or "").lower() in EXTERNAL_GROUP_POLICIES
        for channel in (config.channels or {}).values()
    )
    has_filter = any(marker in config_text for marker in ("filter", "output_guard", "content_policy"))
    if not has_filter and (has_elevated or has_external):
        findings.append(
            Finding(
                id="MODEL-013",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No output filtering configured",
                description="No output filter, content policy or output guard configuration found",
                risk="Agent output may carry harmful or sensitive content unchecked",
                remediation="Configure output filtering or content policies for production agents",
            )
        )
    return findings
