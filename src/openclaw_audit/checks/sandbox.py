from __future__ import annotations

from openclaw_audit.checks.base import CheckContext
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Finding, FixType, Severity
from openclaw_audit.models.openclaw import OpenClawConfig

CATEGORY = "Sandbox Configuration"

DISABLED_MODES = {"off", "disabled", "none"}
MINIMAL_SCOPES = {"none", "minimal"}
MAX_ELEVATED_TOOLS = 5


def check_sandbox(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    findings: list[Finding] = []
    sandbox = config.sandbox
    config_path = files.config_path

    if sandbox is not None:
        mode = (sandbox.mode or "").lower()
        if mode in DISABLED_MODES:
            findings.append(
                Finding(
                    id="SANDBOX-001",
                    severity=Severity.HIGH,
                    category=CATEGORY,
                    title="Sandbox disabled",
                    description=f'sandbox.mode is "{sandbox.mode}" so tools run directly on the host',
                    risk="A prompt-injected tool call has full access to your files and network",
                    remediation='Set sandbox.mode to "all" (or "non-main" for group sessions)',
                    auto_fixable=True,
                    fix_type=FixType.BEHAVIORAL,
                    file=config_path,
                )
            )

        if (sandbox.scope or "").lower() in MINIMAL_SCOPES:
            findings.append(
                Finding(
                    id="SANDBOX-002",
                    severity=Severity.MEDIUM,
                    category=CATEGORY,
                    title="Sandbox scope is minimal",
                    description=f'sandbox.scope is "{sandbox.scope}"',
                    risk="Most tool activity escapes isolation",
                    remediation='Set sandbox.scope to "full" or "session"',
                    file=config_path,
                )
            )

        if (sandbox.workspace_access or "").lower() == "rw":
            findings.append(
                Finding(
                    id="SANDBOX-003",
                    severity=Severity.MEDIUM,
                    category=CATEGORY,
                    title="Sandbox has read-write workspace access",
                    description='sandbox.workspaceAccess is "rw"',
                    risk="Sandboxed code can modify or delete workspace files",
                    remediation='Set sandbox.workspaceAccess to "ro" unless writes are required',
                    file=config_path,
                )
            )

        docker = sandbox.docker
        if docker is not None and docker.network and docker.network.lower() != "none":
            findings.append(
                Finding(
                    id="SANDBOX-006",
                    severity=Severity.HIGH,
                    category=CATEGORY,
                    title="Sandbox container has network access",
                    description=f'sandbox.docker.network is "{docker.network}"',
                    risk="Sandboxed code can exfiltrate data or reach internal services",
                    remediation='Set sandbox.docker.network to "none"',
                    file=config_path,
                )
            )

        if docker is not None and docker.socket_mounted is True:
            findings.append(
                Finding(
                    id="SANDBOX-007",
                    severity=Severity.CRITICAL,
                    category=CATEGORY,
                    title="Docker socket mounted into sandbox",
                    description="sandbox.docker.socketMounted is true",
                    risk="Access to the Docker socket is equivalent to root on the host",
                    remediation="Set sandbox.docker.socketMounted to false",
                    auto_fixable=True,
                    fix_type=FixType.SAFE,
                    file=config_path,
                )
            )

        browser = sandbox.browser
        if browser is not None and browser.allow_host_control is True:
            findings.append(
                Finding(
                    id="SANDBOX-008",
                    severity=Severity.MEDIUM,
                    category=CATEGORY,
                    title="Sandboxed browser can control the host browser",
                    description="sandbox.browser.allowHostControl is true",
                    risk="The agent can drive your logged-in browser sessions",
                    remediation="Set sandbox.browser.allowHostControl to false",
                    auto_fixable=True,
                    fix_type=FixType.SAFE,
                    file=config_path,
                )
            )

    elevated = (config.tools.elevated if config.tools else None) or []
    if len(elevated) > MAX_ELEVATED_TOOLS:
        findings.append(
            Finding(
                id="SANDBOX-004",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title="Many tools bypass the sandbox",
                description=f"{len(elevated)} tools are elevated (more than {MAX_ELEVATED_TOOLS})",
                risk="Each elevated tool runs outside the sandbox",
                remediation="Trim tools.elevated to the few tools that truly need host access",
                file=config_path,
            )
        )

    if elevated:
        listed = ", ".join(elevated[:MAX_ELEVATED_TOOLS])
        if len(elevated) > MAX_ELEVATED_TOOLS:
            listed += "..."
        findings.append(
            Finding(
                id="SANDBOX-005",
                severity=Severity.LOW,
                category=CATEGORY,
                title="Elevated tools should be documented",
                description=f"Elevated tools: {listed}",
                risk="Undocumented elevated tools are easy to forget during review",
                remediation="Document why each elevated tool needs host access",
                file=config_path,
            )
        )

    return findings
