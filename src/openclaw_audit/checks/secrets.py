from __future__ import annotations

import json
import logging
import re
import subprocess
import sys
import time
from pathlib import Path

from openclaw_audit.checks.base import (
    SUBPROCESS_TIMEOUT_S,
    CheckContext,
    file_mode,
    first_names,
    name_of,
    read_sample,
    read_text,
    run_git,
)
from openclaw_audit.discovery.finder import is_within_root
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, FixType, Severity
from openclaw_audit.models.openclaw import OpenClawConfig
from openclaw_audit.parsers.env import parse_env
from openclaw_audit.parsers.jsonl import MAX_LINES, parse_jsonl
from openclaw_audit.parsers.secrets import (
    API_KEY_PATTERNS,
    api_key_values,
    contains_api_key,
    count_api_keys,
    find_secrets,
)
from openclaw_audit.utils.capped import budget_for

logger = logging.getLogger(__name__)

CATEGORY = "Secret Scanning"

SESSION_LOG_SAMPLE = 5
STACK_TRACE_SAMPLE = 3
MARKDOWN_SAMPLE = 10
MARKDOWN_KEY_SAMPLE = 5

MARKDOWN_CHECK_IDS = {
    "SOUL.MD": "SECRET-007",
    "AGENTS.MD": "SECRET-008",
    "TOOLS.MD": "SECRET-009",
}
EXTRA_ENV_FILES = (".env.production", ".env.staging", ".env.development")

DB_URL_PATTERNS = (
    re.compile(r"postgres(?:ql)?://[^\s\"']+", re.IGNORECASE),
    re.compile(r"mysql://[^\s\"']+", re.IGNORECASE),
    re.compile(r"mongodb(?:\+srv)?://[^\s\"']+", re.IGNORECASE),
    re.compile(r"redis://[^\s\"']+", re.IGNORECASE),
)
OAUTH_PATTERNS = (
    re.compile(r"Bearer\s+[a-zA-Z0-9\-_.~+/]+=*"),
    re.compile(r"access_token[=:]\s*[a-zA-Z0-9\-_.~+/]{20,}"),
)
WEBHOOK_PATTERNS = (
    re.compile(r"whsec_[a-zA-Z0-9]{20,}"),
    re.compile(r"webhook[_-]?secret\"?\s*[=:]\s*\"[^$]", re.IGNORECASE),
)
AWS_KEY_RE = re.compile(r"AWS_ACCESS_KEY_ID\"?\s*[=:]\s*[\"']?(?!\$\{)[A-Z0-9]{16,}")
AWS_SECRET_RE = re.compile(r"AWS_SECRET_ACCESS_KEY\"?\s*[=:]\s*[\"']?(?!\$\{)[a-zA-Z0-9/+=]{30,}")
JWT_SECRET_RE = re.compile(r"jwt[_-]?secret\"?\s*[=:]\s*[\"']([^\"'$][^\"']{0,30})[\"']", re.IGNORECASE)
BILLING_PATTERNS = (
    re.compile(r"sk_live_[a-zA-Z0-9]{20,}"),
    re.compile(r"rk_live_[a-zA-Z0-9]{20,}"),
)
INTERNAL_PATTERNS = (
    re.compile(r"\b10\.\d{1,3}\.\d{1,3}\.\d{1,3}\b"),
    re.compile(r"\b172\.(?:1[6-9]|2\d|3[01])\.\d{1,3}\.\d{1,3}\b"),
    re.compile(r"\b192\.168\.\d{1,3}\.\d{1,3}\b"),
    re.compile(r"staging\.", re.IGNORECASE),
    re.compile(r"\.internal\b", re.IGNORECASE),
    re.compile(r"\.local\b", re.IGNORECASE),
)
ROTATION_RE = re.compile(
    r"_OLD|_BACKUP|_PREVIOUS|ROTATED|EXPIRED|rotation|rotate_at|expires|valid_until",
    re.IGNORECASE,
)
STACK_LEAK_RE = re.compile(
    r"(?:Error|Exception|Traceback)[\s\S]{0,200}(?:password|token|secret|key)\s*[=:]",
    re.IGNORECASE,
)
SECRET_SCANNER_RE = re.compile(r"trufflehog|gitguardian|gitleaks|detect-secrets|secret.*scan", re.IGNORECASE)
SENSITIVE_COMMIT_RE = re.compile(r"\b(?:password|token|secret|api[_-]?key)\s*[=:]", re.IGNORECASE)
SERVICE_ACCOUNT_RE = re.compile(r"service[_-]?account|client_email.*iam\.gserviceaccount", re.IGNORECASE)
DANGEROUS_ACL_RE = re.compile(
    r"\b(?:Everyone|Users|BUILTIN\\Users|Authenticated Users)\s*:\s*\((?!N\))",
    re.IGNORECASE,
)

ROTATION_WINDOW_DAYS = 30


def _sibling(files: DiscoveredFiles, name: str) -> Path | None:
    """Return ``<root>/<name>`` if it exists and stays inside the root."""
    candidate = Path(files.root) / name
    try:
        if not candidate.exists():
            return None
        if not is_within_root(candidate.resolve(), files.root):
            logger.info("ignoring %s: resolves outside installation directory", candidate)
            return None
    except (OSError, RuntimeError):
        return None
    return candidate


def _config_findings(raw: str, files: DiscoveredFiles) -> list[Finding]:
    findings: list[Finding] = []
    config_path = files.config_path

    key_count = count_api_keys(raw)
    if key_count > 0:
        findings.append(
            Finding(
                id="SECRET-001",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="API key(s) found in openclaw.json",
                description=f"{key_count} hardcoded API key(s) detected, move all of them to .env",
                risk="Keys are exposed whenever the config is shared, committed or backed up",
                remediation="Move keys to .env and reference them with ${VAR_NAME} substitution",
                file=config_path,
            )
        )

    if any(pattern.search(raw) for pattern in DB_URL_PATTERNS):
        findings.append(
            Finding(
                id="SECRET-015",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Database connection string in config",
                description="A database URL in openclaw.json may embed credentials",
                risk="Connection strings often carry a username and password",
                remediation="Move database URLs to .env and use ${VAR} substitution",
                file=config_path,
            )
        )

    if any(pattern.search(raw) for pattern in WEBHOOK_PATTERNS):
        findings.append(
            Finding(
                id="SECRET-017",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Webhook secret in plaintext config",
                description="A webhook signing secret is stored in openclaw.json instead of .env",
                risk="Exposed webhook secrets allow forged webhook payloads",
                remediation="Move webhook secrets to .env and use ${VAR} substitution",
                file=config_path,
            )
        )

    if AWS_KEY_RE.search(raw) or AWS_SECRET_RE.search(raw):
        findings.append(
            Finding(
                id="SECRET-019",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="AWS credentials in config",
                description="An AWS access key or secret key is hardcoded in openclaw.json",
                risk="AWS credentials grant access to billing, data and infrastructure",
                remediation="Move AWS credentials to .env or use IAM roles",
                file=config_path,
            )
        )

    jwt_match = JWT_SECRET_RE.search(raw)
    if jwt_match and len(jwt_match.group(1)) < 32:
        findings.append(
            Finding(
                id="SECRET-020",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="JWT secret is weak",
                description=f"JWT signing secret is only {len(jwt_match.group(1))} characters (minimum 32)",
                risk="Short JWT secrets can be brute-forced to forge tokens",
                remediation="Use a JWT secret of at least 32 random characters or asymmetric keys",
                file=config_path,
            )
        )

    if any(pattern.search(raw) for pattern in INTERNAL_PATTERNS):
        findings.append(
            Finding(
                id="SECRET-022",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="Internal IPs or staging domains in config",
                description="openclaw.json contains private IP addresses or internal host names",
                risk="Shared configs reveal internal network layout",
                remediation="Use ${VAR} substitution for environment-specific hosts",
                file=config_path,
            )
        )

    if any(pattern.search(raw) for pattern in BILLING_PATTERNS):
        findings.append(
            Finding(
                id="SECRET-029",
                severity=Severity.CRITICAL,
                category=CATEGORY,
                title="Live billing API key in config",
                description="A live Stripe key with billing access is stored in openclaw.json",
                risk="Live billing keys can create charges and read financial data",
                remediation="Move billing keys to .env and prefer restricted keys",
                file=config_path,
            )
        )

    return findings


def _env_findings(raw_config: str | None, files: DiscoveredFiles) -> list[Finding]:
    findings: list[Finding] = []
    if files.env_path is None:
        if raw_config and contains_api_key(raw_config):
            findings.extend(_rotation_findings(None))
        return findings

    gitignore = _sibling(files, ".gitignore")
    gitignore_text = read_text(gitignore) if gitignore is not None else None
    if gitignore_text is None:
        findings.append(
            Finding(
                id="SECRET-002",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="No .gitignore found",
                description="The OpenClaw directory has no .gitignore, so .env and credentials may be committed",
                risk="Secrets can be committed to git by accident",
                remediation="Create a .gitignore containing .env, credentials/ and *.key",
                auto_fixable=True,
                fix_type=FixType.SAFE,
            )
        )
    elif ".env" not in gitignore_text:
        findings.append(
            Finding(
                id="SECRET-002",
                severity=Severity.HIGH,
                category=CATEGORY,
                title=".env not in .gitignore",
                description=".env exists but is not listed in .gitignore",
                risk="Secrets in .env can be committed to git by accident",
                remediation="Add .env to .gitignore",
                auto_fixable=True,
                fix_type=FixType.SAFE,
                file=str(gitignore),
            )
        )

    env_values = parse_env(files.env_path)
    for key, value in env_values.items():
        if "jwt" in key.lower() and "secret" in key.lower() and value and not value.startswith("${") and len(value) < 32:
            findings.append(
                Finding(
                    id="SECRET-020",
                    severity=Severity.MEDIUM,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="JWT secret is weak",
                    description=f"{key} is only {len(value)} characters (minimum 32)",
                    risk="Short JWT secrets can be brute-forced to forge tokens",
                    remediation="Use a JWT secret of at least 32 random characters or asymmetric keys",
                    file=files.env_path,
                )
            )
            break

    if _sibling(files, ".env.example") is None:
        findings.append(
            Finding(
                id="SECRET-021",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No .env.example file",
                description=".env exists but no .env.example documents the required variables",
                risk="Collaborators may copy real .env files around to learn the variable names",
                remediation="Create a .env.example with variable names and no values",
            )
        )

    findings.extend(_rotation_findings(files.env_path))
    findings.extend(_shared_env_findings(files))
    return findings


def _rotation_findings(env_path: str | None) -> list[Finding]:
    if env_path is not None:
        env_text = read_text(env_path)
        if env_text is not None and ROTATION_RE.search(env_text):
            return []
        try:
            age_days = (time.time() - Path(env_path).stat().st_mtime) / 86400
        except OSError:
            age_days = None
        if age_days is not None and age_days < ROTATION_WINDOW_DAYS:
            return []

    return [
        Finding(
            id="SECRET-023",
            severity=Severity.LOW,
            confidence=Confidence.LOW,
            category=CATEGORY,
            title="No credential rotation evidence",
            description="No expiry dates, rotation markers or recent credential updates were found",
            risk="Long-lived credentials widen the exposure window after a leak",
            remediation="Adopt a key rotation schedule and document the procedure",
        )
    ]


def _shared_env_findings(files: DiscoveredFiles) -> list[Finding]:
    base_text = read_text(files.env_path) if files.env_path else None
    if base_text is None:
        return []
    others: list[set[str]] = []
    for name in EXTRA_ENV_FILES:
        candidate = _sibling(files, name)
        text = read_text(candidate) if candidate is not None else None
        if text is not None:
            others.append({line.strip() for line in text.splitlines()})
    if not others:
        return []

    base_lines = [
        line.strip()
        for line in base_text.splitlines()
        if "=" in line and not line.strip().startswith("#")
    ]
    shared = [line for line in base_lines if any(line in other for other in others)]
    if not shared:
        return []
    return [
        Finding(
            id="SECRET-024",
            severity=Severity.MEDIUM,
            confidence=Confidence.MEDIUM,
            category=CATEGORY,
            title="Shared credentials across environments",
            description=f"{len(shared)} credential(s) are identical across multiple .env files",
            risk="A breach in one environment compromises every environment",
            remediation="Use distinct credentials for production, staging and development",
        )
    ]


def _loose_permission(
    check_id: str,
    title: str,
    path: str,
    expected: int,
    risk: str,
) -> Finding | None:
    mode = file_mode(path)
    if mode is None or mode == expected:
        return None
    return Finding(
        id=check_id,
        severity=Severity.HIGH,
        category=CATEGORY,
        title=title,
        description=f"{name_of(path)} has permissions {mode:o} (should be {expected:o})",
        risk=risk,
        remediation=f'Run: chmod {expected:o} "{path}"',
        auto_fixable=True,
        fix_type=FixType.SAFE,
        file=path,
    )


def _windows_acl_findings(files: DiscoveredFiles) -> list[Finding]:
    try:
        completed = subprocess.run(
            ["icacls", files.root],
            capture_output=True,
            text=True,
            timeout=SUBPROCESS_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as error:
        logger.debug("icacls failed for '%s': %s", files.root, error)
        return [
            Finding(
                id="SECRET-003",
                severity=Severity.LOW,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Windows ACL check inconclusive",
                description="Could not verify Windows file permissions (icacls unavailable or failed)",
                risk="Other accounts may be able to read OpenClaw files",
                remediation="Verify in Windows Security settings that only your account can access the directory",
            )
        ]

    if DANGEROUS_ACL_RE.search(completed.stdout):
        return [
            Finding(
                id="SECRET-003",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="OpenClaw directory has permissive Windows ACLs",
                description="Everyone or Users groups have access to the OpenClaw directory",
                risk="Other users on this system can read your configuration and secrets",
                remediation='Run: icacls "%USERPROFILE%\\.openclaw" /inheritance:r /grant:r "%USERNAME%:F"',
                file=files.root,
            )
        ]
    return []


def _permission_findings(files: DiscoveredFiles) -> list[Finding]:
    if sys.platform == "win32":
        return _windows_acl_findings(files)

    findings: list[Finding] = []
    root_mode = file_mode(files.root)
    if root_mode is not None and root_mode != 0o700:
        findings.append(
            Finding(
                id="SECRET-003",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="OpenClaw directory has loose permissions",
                description=f"{files.root} has permissions {root_mode:o} (should be 700)",
                risk="Other users on this system can read your configuration and secrets",
                remediation=f'Run: chmod 700 "{files.root}"',
                auto_fixable=True,
                fix_type=FixType.SAFE,
                file=files.root,
            )
        )

    candidates: list[Finding | None] = []
    if files.config_path:
        candidates.append(
            _loose_permission(
                "SECRET-004",
                "Config file has loose permissions",
                files.config_path,
                0o600,
                "Other users can read your agent configuration",
            )
        )
    for path in files.credential_files:
        candidates.append(
            _loose_permission(
                "SECRET-005",
                "Credential file has loose permissions",
                path,
                0o600,
                "Other users can read your channel credentials",
            )
        )
    for path in files.auth_profile_files:
        candidates.append(
            _loose_permission(
                "SECRET-006",
                "Auth profile has loose permissions",
                path,
                0o600,
                "Other users can read your model provider API keys",
            )
        )
    findings.extend(item for item in candidates if item is not None)
    return findings


def _markdown_findings(raw_config: str | None, files: DiscoveredFiles) -> list[Finding]:
    findings: list[Finding] = []
    for path in files.workspace_markdown_files:
        text = read_text(path)
        if text is None:
            continue
        matches = find_secrets(text)
        if not matches:
            continue
        name = name_of(path).upper()
        first = matches[0]
        findings.append(
            Finding(
                id=MARKDOWN_CHECK_IDS.get(name, "SECRET-010"),
                severity=Severity.CRITICAL if name == "TOOLS.MD" else Severity.HIGH,
                category=CATEGORY,
                title=f"Secret found in {name}",
                description=(
                    f"{len(matches)} potential secret(s) detected, first: {first.pattern} at line {first.line}"
                ),
                risk=f"Secrets in {name} may leak through git, cloud sync or agent output",
                remediation=f"Move secrets from {name} to .env and reference them by variable name",
                file=path,
                line=first.line,
            )
        )

    if files.workspace_root:
        for path in files.workspace_markdown_files[:MARKDOWN_SAMPLE]:
            text = read_text(path)
            if text is not None and SERVICE_ACCOUNT_RE.search(text):
                findings.append(
                    Finding(
                        id="SECRET-028",
                        severity=Severity.HIGH,
                        confidence=Confidence.MEDIUM,
                        category=CATEGORY,
                        title="Service account key referenced in workspace",
                        description=f"{name_of(path)} references a cloud service account",
                        risk="Service account keys grant programmatic access to cloud infrastructure",
                        remediation="Remove service account details from workspace files and use workload identity",
                        file=path,
                    )
                )
                break

    if raw_config:
        config_keys = api_key_values(raw_config)
        for path in files.workspace_markdown_files[:MARKDOWN_KEY_SAMPLE] if config_keys else []:
            text = read_text(path)
            if text is not None and any(key in text for key in config_keys):
                findings.append(
                    Finding(
                        id="SECRET-030",
                        severity=Severity.LOW,
                        confidence=Confidence.MEDIUM,
                        category=CATEGORY,
                        title="API key duplicated across files",
                        description=f"The same API key appears in both openclaw.json and {name_of(path)}",
                        risk="Every extra copy of a key is another place it can leak from",
                        remediation="Define keys once in .env and use ${VAR} references everywhere",
                        file=path,
                    )
                )
    return findings


def _entry_text(entry: dict[str, object]) -> str:
    content = entry.get("content")
    if isinstance(content, str):
        return content
    if content is None:
        return ""
    return json.dumps(content)


def _session_log_findings(files: DiscoveredFiles, deep: bool) -> list[Finding]:
    findings: list[Finding] = []
    for path in files.session_log_files[:SESSION_LOG_SAMPLE]:
        try:
            result = parse_jsonl(path, budget_for(deep), None if deep else MAX_LINES)
        except OSError as error:
            logger.debug("skipping unreadable session log '%s': %s", path, error)
            continue

        if result.truncated:
            size_mb = result.total_size_bytes / (1024 * 1024)
            findings.append(
                Finding(
                    id="SECRET-011",
                    severity=Severity.LOW,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title=f"Large session log ({size_mb:.1f}MB) only sampled",
                    description=f"{name_of(path)} is {size_mb:.1f}MB and was only partially scanned",
                    risk="Secrets in later portions of the log may be missed",
                    remediation="Run with --deep to scan more of each session log",
                    file=path,
                )
            )

        if any(
            pattern.search(_entry_text(entry)) for entry in result.entries for pattern in API_KEY_PATTERNS
        ):
            findings.append(
                Finding(
                    id="SECRET-012",
                    severity=Severity.HIGH,
                    category=CATEGORY,
                    title="API key leaked in session log",
                    description=f"Potential API key found in session log {name_of(path)}",
                    risk="Session logs with leaked keys may be backed up or synced to cloud",
                    remediation="Rotate the exposed key immediately and clear the session logs",
                    file=path,
                )
            )

    for path in files.session_log_files[:SESSION_LOG_SAMPLE]:
        content = read_sample(path)
        if content is not None and any(pattern.search(content) for pattern in OAUTH_PATTERNS):
            findings.append(
                Finding(
                    id="SECRET-016",
                    severity=Severity.HIGH,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="OAuth/access token in session log",
                    description=f"{name_of(path)} contains Bearer or access_token values",
                    risk="OAuth tokens in logs can be replayed to impersonate users",
                    remediation="Enable session log scrubbing for Bearer and access tokens",
                    file=path,
                )
            )
            break

    for path in files.session_log_files[:STACK_TRACE_SAMPLE]:
        content = read_sample(path)
        if content is not None and STACK_LEAK_RE.search(content):
            findings.append(
                Finding(
                    id="SECRET-025",
                    severity=Severity.MEDIUM,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Credentials in error messages",
                    description=f"{name_of(path)} contains stack traces that may leak secret values",
                    risk="Anyone with log access can read credentials printed in errors",
                    remediation="Strip credential values from error output before logging",
                    file=path,
                )
            )
            break
    return findings


def _key_file_findings(files: DiscoveredFiles) -> list[Finding]:
    findings: list[Finding] = []
    if files.private_key_files:
        findings.append(
            Finding(
                id="SECRET-013",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Private key files in workspace",
                description=(
                    f"{len(files.private_key_files)} private key file(s) found: "
                    f"{first_names(files.private_key_files)}"
                ),
                risk="Agents can read workspace keys, and git or cloud sync can copy them",
                remediation="Move private keys outside the workspace (e.g. ~/.ssh/)",
                file=files.private_key_files[0],
            )
        )
        if files.workspace_root and (Path(files.workspace_root) / ".git").exists():
            findings.append(
                Finding(
                    id="SECRET-014",
                    severity=Severity.MEDIUM,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Certificate/key files may be committed to git",
                    description="Private key or certificate files exist in a git-tracked workspace",
                    risk="Keys committed to git stay in repository history",
                    remediation="Add *.pem, *.key, *.p12, *.cer and *.crt to .gitignore",
                )
            )

    if files.ssh_key_files:
        findings.append(
            Finding(
                id="SECRET-018",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="SSH keys in workspace",
                description=f"SSH key file(s) found: {first_names(files.ssh_key_files)}",
                risk="Agents can read workspace SSH keys, and git can commit them",
                remediation="Move SSH keys to ~/.ssh/ and add id_rsa and id_ed25519 to .gitignore",
                file=files.ssh_key_files[0],
            )
        )
    return findings


def _ci_texts(workspace: Path) -> list[str] | None:
    texts: list[str] = []
    found = False
    workflows = workspace / ".github" / "workflows"
    if workflows.is_dir():
        found = True
        try:
            entries = sorted(workflows.iterdir())
        except OSError:
            entries = []
        for entry in entries:
            if entry.suffix in {".yml", ".yaml"}:
                texts.append(read_text(entry) or "")
    for name in (".gitlab-ci.yml", "Jenkinsfile"):
        candidate = workspace / name
        if candidate.is_file():
            found = True
            texts.append(read_text(candidate) or "")
    return texts if found else None


def _workspace_process_findings(files: DiscoveredFiles) -> list[Finding]:
    if not files.workspace_root:
        return []
    workspace = Path(files.workspace_root)
    findings: list[Finding] = []

    ci_texts = _ci_texts(workspace)
    if ci_texts is not None and not any(SECRET_SCANNER_RE.search(text) for text in ci_texts):
        findings.append(
            Finding(
                id="SECRET-026",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No secrets scanning in CI",
                description="A CI pipeline exists but no secret scanning tool was detected",
                risk="Accidentally committed secrets are not caught before they spread",
                remediation="Add TruffleHog, GitGuardian or gitleaks to the CI pipeline",
            )
        )

    if (workspace / ".git").exists():
        started = time.perf_counter()
        log = run_git(["log", "-50", "--format=%s"], workspace)
        elapsed_ms = (time.perf_counter() - started) * 1000
        if elapsed_ms > 2000:
            logger.warning("git log took %.0fms in %s", elapsed_ms, workspace)
        if log and SENSITIVE_COMMIT_RE.search(log):
            findings.append(
                Finding(
                    id="SECRET-027",
                    severity=Severity.MEDIUM,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Sensitive terms in git commit messages",
                    description="Recent commit messages reference passwords, tokens or API keys",
                    risk="Commit messages are visible to anyone with repository access",
                    remediation="Keep credential values out of commit messages",
                )
            )
    return findings


def check_secrets(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    raw = context.raw_config
    findings: list[Finding] = []
    if raw:
        findings.extend(_config_findings(raw, files))
    findings.extend(_env_findings(raw, files))
    findings.extend(_permission_findings(files))
    findings.extend(_markdown_findings(raw, files))
    findings.extend(_session_log_findings(files, context.deep))
    findings.extend(_key_file_findings(files))
    findings.extend(_workspace_process_findings(files))
    return findings
