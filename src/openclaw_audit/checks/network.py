from __future__ import annotations

from openclaw_audit.checks.base import CheckContext
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, FixType, Severity
from openclaw_audit.models.openclaw import OpenClawConfig

CATEGORY = "Network Exposure"

EXPOSED_BINDS = {"0.0.0.0", "::", "[::]", "*", "lan"}
LOOPBACK_BINDS = {"127.0.0.1", "localhost", "::1", "[::1]", "loopback"}
DISABLED_AUTH_MODES = {"off", "none", "disabled"}
MIN_TOKEN_LENGTH = 32
WEAK_TOKENS = {
    "password",
    "changeme",
    "secret",
    "admin",
    "token",
    "default",
    "test",
    "openclaw",
    "letmein",
    "qwerty",
    "123456",
    "12345678",
}


def _is_env_reference(value: str) -> bool:
    stripped = value.strip()
    return stripped.startswith("${") and stripped.endswith("}")


def check_network(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    gateway = config.gateway
    if gateway is None:
        return []

    findings: list[Finding] = []
    bind = (gateway.bind or "").strip().lower()
    auth = gateway.auth
    auth_mode = (auth.mode or "").strip().lower() if auth else ""

    if bind in EXPOSED_BINDS:
        unauthenticated = auth is None or auth_mode in DISABLED_AUTH_MODES
        suffix = " with no authentication configured" if unauthenticated else ""
        findings.append(
            Finding(
                id="NETWORK-001",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="Gateway bound to all network interfaces",
                description=f'gateway.bind is "{gateway.bind}"{suffix}',
                risk="Anyone on the local network (or internet, if ports are forwarded) can reach the agent gateway",
                remediation='Set gateway.bind to "127.0.0.1" and use a tunnel or reverse proxy for remote access',
                auto_fixable=True,
                fix_type=FixType.BEHAVIORAL,
                file=files.config_path,
            )
        )

    if auth is not None and auth_mode in DISABLED_AUTH_MODES:
        findings.append(
            Finding(
                id="NETWORK-002",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="Gateway authentication disabled",
                description=f'gateway.auth.mode is "{auth.mode}"',
                risk="Any client that can reach the gateway can control the agent",
                remediation='Set gateway.auth.mode to "token" and configure a strong token via ${VAR} substitution',
                file=files.config_path,
            )
        )

    token = auth.token if auth else None
    if token and not _is_env_reference(token):
        if token.strip().lower() in WEAK_TOKENS:
            findings.append(
                Finding(
                    id="NETWORK-004",
                    severity=Severity.CRITICAL,
                    category=CATEGORY,
                    title="Gateway token is a common weak value",
                    description="gateway.auth.token is a well-known default or dictionary word",
                    risk="Weak tokens are guessed within seconds by automated scanners",
                    remediation="Generate a random token (e.g. openssl rand -hex 32) and store it in .env",
                    file=files.config_path,
                )
            )
        elif len(token) < MIN_TOKEN_LENGTH:
            findings.append(
                Finding(
                    id="NETWORK-003",
                    severity=Severity.HIGH,
                    category=CATEGORY,
                    title="Gateway token is too short",
                    description=f"gateway.auth.token is {len(token)} characters (minimum {MIN_TOKEN_LENGTH})",
                    risk="Short tokens can be brute-forced",
                    remediation="Use a random token of at least 32 characters stored in .env",
                    file=files.config_path,
                )
            )

    if bind and bind not in LOOPBACK_BINDS and not gateway.trusted_proxies:
        findings.append(
            Finding(
                id="NETWORK-005",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="No trusted proxies configured for non-loopback gateway",
                description=f'gateway.bind is "{gateway.bind}" but gateway.trustedProxies is empty',
                risk="Forwarded client addresses cannot be validated, weakening per-client controls",
                remediation="List your reverse proxy addresses in gateway.trustedProxies",
                file=files.config_path,
            )
        )

    if gateway.allow_insecure_auth is True:
        findings.append(
            Finding(
                id="NETWORK-006",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Insecure authentication allowed",
                description="gateway.allowInsecureAuth is true",
                risk="Credentials may be sent over unencrypted connections and intercepted",
                remediation="Set gateway.allowInsecureAuth to false and serve the gateway over TLS",
                auto_fixable=True,
                fix_type=FixType.SAFE,
                file=files.config_path,
            )
        )

    if gateway.dangerously_disable_device_auth is True:
        findings.append(
            Finding(
                id="NETWORK-007",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="Device authentication disabled",
                description="gateway.dangerouslyDisableDeviceAuth is true",
                risk="Unpaired devices can connect to the gateway without approval",
                remediation="Remove gateway.dangerouslyDisableDeviceAuth or set it to false",
                auto_fixable=True,
                fix_type=FixType.SAFE,
                file=files.config_path,
            )
        )

    return findings
