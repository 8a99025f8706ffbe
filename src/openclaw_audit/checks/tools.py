from __future__ import annotations

import re
from collections.abc import Callable

from openclaw_audit.checks.base import CheckContext, name_of, read_sample, read_text
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, Severity
from openclaw_audit.models.openclaw import OpenClawConfig

CATEGORY = "Tool Security"

MAX_ELEVATED = 5
PACKAGE_SAMPLE = 5
LOG_SAMPLE = 3

DANGEROUS_TOOLS = ("exec", "shell", "bash", "sh", "cmd", "powershell", "terminal", "run_command")
EVAL_PATTERNS = (
    re.compile(r"\beval\s*\("),
    re.compile(r"\bexec\s*\("),
    re.compile(r"\bsubprocess\b"),
    re.compile(r"\bchild_process\b"),
    re.compile(r"\bspawn\s*\("),
    re.compile(r"new\s+Function\s*\("),
)
SUDO_PATTERNS = (re.compile(r"\bsudo\b"), re.compile(r"\bdoas\b"), re.compile(r"\brunas\b"))
DOCKER_SOCKET_RE = re.compile(r"docker\.sock|/var/run/docker", re.IGNORECASE)
HOST_NETWORK_RE = re.compile(r"--net(?:work)?[=\s]+host", re.IGNORECASE)
DYNAMIC_LOAD_RE = re.compile(r"require\s*\(|import\s*\(|loadModule|dynamicImport", re.IGNORECASE)
LOOSE_PIN_RE = re.compile(r'"\*"|"\^|"~')
SHELL_SECRET_RE = re.compile(r"(?:password|token|secret|key)\s*[=:]\s*\S+", re.IGNORECASE)
SHELL_TOOL_RE = re.compile(r"bash|shell|exec|run_command", re.IGNORECASE)


def _first_match(paths: list[str], predicate: Callable[[str], bool]) -> str | None:
    for path in paths:
        content = read_text(path)
        if content is not None and predicate(content):
            return path
    return None


def _command_findings(files: DiscoveredFiles) -> list[Finding]:
    findings: list[Finding] = []
    commands = files.custom_command_files

    path = _first_match(commands, lambda text: bool(DOCKER_SOCKET_RE.search(text)))
    if path:
        findings.append(
            Finding(
                id="TOOLS-008",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="Docker socket referenced in custom command",
                description=f"{name_of(path)} references docker.sock, which grants full host access",
                risk="Docker socket access is root-equivalent on the host",
                remediation="Remove docker.sock references from custom commands and use rootless Docker",
                file=path,
            )
        )

    path = _first_match(commands, lambda text: bool(HOST_NETWORK_RE.search(text)))
    if path:
        findings.append(
            Finding(
                id="TOOLS-009",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Host network mode in custom command",
                description=f"{name_of(path)} uses --net=host so the container shares the host network",
                risk="The container can reach every host interface and local service",
                remediation="Use bridge or none network mode instead of host",
                file=path,
            )
        )

    path = _first_match(commands, lambda text: any(pattern.search(text) for pattern in SUDO_PATTERNS))
    if path:
        findings.append(
            Finding(
                id="TOOLS-010",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Privilege escalation in custom command",
                description=f"{name_of(path)} contains sudo, doas or runas",
                risk="Custom commands running as root bypass all sandbox protections",
                remediation="Remove privilege escalation from custom commands and run with least privilege",
                file=path,
            )
        )

    path = _first_match(commands, lambda text: bool(DYNAMIC_LOAD_RE.search(text)))
    if path:
        findings.append(
            Finding(
                id="TOOLS-018",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Dynamic tool loading detected",
                description=f"{name_of(path)} loads modules dynamically at runtime",
                risk="Dynamically loaded tools can be swapped by changing the load path",
                remediation="Use static imports and pin tool sources to trusted locations",
                file=path,
            )
        )
    return findings


def _elevated_findings(config: OpenClawConfig, files: DiscoveredFiles) -> list[Finding]:
    tools = config.tools
    elevated = (tools.elevated if tools else None) or []
    use_groups = tools.use_access_groups if tools else None
    findings: list[Finding] = []

    if len(elevated) > MAX_ELEVATED:
        findings.append(
            Finding(
                id="TOOLS-001",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title="Excessive elevated tools",
                description=f"{len(elevated)} tools are elevated, a large attack surface",
                risk="Each elevated tool bypasses sandbox restrictions",
                remediation=f"Reduce elevated tools to the minimum needed (ideally {MAX_ELEVATED} or fewer)",
                file=files.config_path,
            )
        )

    dangerous = [tool for tool in elevated if any(marker in tool.lower() for marker in DANGEROUS_TOOLS)]
    if dangerous:
        findings.append(
            Finding(
                id="TOOLS-002",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="Dangerous tools elevated",
                description=f"Shell or exec tools elevated: {', '.join(dangerous)}",
                risk="Elevated shell access allows arbitrary command execution outside the sandbox",
                remediation="Remove shell and exec from elevated tools and use scoped tools instead",
                file=files.config_path,
            )
        )

    if elevated and use_groups is not True:
        findings.append(
            Finding(
                id="TOOLS-003",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title="Tool access groups not enabled",
                description="Tools are elevated but useAccessGroups is not enabled",
                risk="Every user and agent gets the same tool access",
                remediation="Set tools.useAccessGroups to true and define access groups per role",
                file=files.config_path,
            )
        )

    if any("exec" in tool.lower() for tool in elevated) and not use_groups:
        findings.append(
            Finding(
                id="TOOLS-005",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Exec tool elevated without constraints",
                description="An exec tool is elevated with no access group restrictions",
                risk="Anyone who reaches the agent can run arbitrary commands",
                remediation="Add access group constraints or remove exec from elevated tools",
                file=files.config_path,
            )
        )

    if elevated and not any(name_of(path).upper() == "CLAUDE.MD" for path in files.workspace_markdown_files):
        findings.append(
            Finding(
                id="TOOLS-013",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Elevated tools lack documentation",
                description="No CLAUDE.md documents elevated tool usage and constraints",
                risk="Undocumented tool access makes security review difficult",
                remediation="Create a CLAUDE.md that documents which tools are elevated and why",
            )
        )
    return findings


def _gap_findings(config: OpenClawConfig) -> list[Finding]:
    tools = config.tools
    sandbox = config.sandbox
    workspace_rw = bool(sandbox and (sandbox.workspace_access or "").lower() == "rw")
    audit_log = bool(tools and tools.audit_log)
    findings: list[Finding] = []

    if not (tools and tools.allowlist):
        findings.append(
            Finding(
                id="TOOLS-004",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="No tool allowlist configured",
                description="No explicit allowlist of permitted tools, so every tool may be available",
                risk="Agents can use any available tool without restriction",
                remediation="Configure tools.allowlist with only the tools your agent needs",
            )
        )

    if sandbox and sandbox.browser and sandbox.browser.allow_host_control is True:
        findings.append(
            Finding(
                id="TOOLS-006",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Browser host control enabled",
                description="The browser relay allows host-level control without documented constraints",
                risk="The agent can browse with your cookies and authenticated sessions",
                remediation="Restrict browser access to specific domains or disable host control",
            )
        )

    if workspace_rw and not (tools and tools.allowlist is not None):
        findings.append(
            Finding(
                id="TOOLS-007",
                severity=Severity.MEDIUM,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Unrestricted file write access",
                description="The workspace is read-write with no tool allowlist to limit writes",
                risk="The agent can modify any workspace file",
                remediation="Use a tool allowlist or make workspace access read-only where possible",
            )
        )

    if workspace_rw and not audit_log:
        findings.append(
            Finding(
                id="TOOLS-016",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="File deletions not audited",
                description="The workspace is read-write but no audit log records file operations",
                risk="Deleted files cannot be traced back to the action that removed them",
                remediation="Enable tools.auditLog to track file modifications and deletions",
            )
        )

    if not audit_log:
        findings.append(
            Finding(
                id="TOOLS-017",
                severity=Severity.MEDIUM,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No command audit trail",
                description="Tool audit logging is not enabled so tool invocations are not tracked",
                risk="There is no record of which tools ran, when, or with what parameters",
                remediation="Set tools.auditLog to true",
            )
        )

    if not (tools and tools.timeout):
        findings.append(
            Finding(
                id="TOOLS-019",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No tool timeout configured",
                description="No timeout is set for tool execution",
                risk="Runaway tool executions can hang the agent",
                remediation="Set tools.timeout to a reasonable value (e.g. 30000ms)",
            )
        )

    if not (tools and tools.rate_limit):
        findings.append(
            Finding(
                id="TOOLS-020",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No rate limiting on tools",
                description="No rate limit is configured for tool invocations",
                risk="The agent can call tools at an unlimited rate",
                remediation="Set tools.rateLimit to cap invocations per minute",
            )
        )
    return findings


def check_tools(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    findings = _elevated_findings(config, files)
    findings.extend(_gap_findings(config))
    findings.extend(_command_findings(files))

    path = _first_match(files.skill_files, lambda text: any(pattern.search(text) for pattern in EVAL_PATTERNS))
    if path:
        findings.append(
            Finding(
                id="TOOLS-011",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Dynamic code execution in skill",
                description=f"{name_of(path)} uses eval, exec or subprocess",
                risk="Skills with dynamic execution can run arbitrary code",
                remediation="Replace eval and exec with static, validated alternatives",
                file=path,
            )
        )

    if files.custom_command_files and files.skill_files:
        findings.append(
            Finding(
                id="TOOLS-012",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Workspace tools may override managed tools",
                description=(
                    f"{len(files.custom_command_files)} custom commands alongside "
                    f"{len(files.skill_files)} skill files"
                ),
                risk="Custom workspace tools can shadow managed tools and change their behavior",
                remediation="Review custom commands for naming conflicts with managed tools",
            )
        )

    path = _first_match(files.skill_package_files[:PACKAGE_SAMPLE], lambda text: bool(LOOSE_PIN_RE.search(text)))
    if path:
        findings.append(
            Finding(
                id="TOOLS-014",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Skill dependencies not version-pinned",
                description=f"{name_of(path)} uses loose version ranges (^, ~, *)",
                risk="Unpinned dependencies can pull in compromised releases",
                remediation="Pin exact versions in skill package.json dependencies",
                file=path,
            )
        )

    for log_path in files.session_log_files[:LOG_SAMPLE]:
        content = read_sample(log_path)
        if content is not None and SHELL_SECRET_RE.search(content) and SHELL_TOOL_RE.search(content):
            findings.append(
                Finding(
                    id="TOOLS-015",
                    severity=Severity.MEDIUM,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Shell commands may contain secrets in logs",
                    description=f"Session log {name_of(log_path)} contains shell commands with potential secret values",
                    risk="Shell command history in logs may expose passwords or tokens",
                    remediation="Use environment variables instead of inline secrets in shell commands",
                    file=log_path,
                )
            )
            break
    return findings
