from __future__ import annotations

import re
from pathlib import Path

from openclaw_audit.checks.base import (
    CheckContext,
    load_package,
    name_of,
    package_dependencies,
    read_text,
)
from openclaw_audit.discovery.finder import is_within_root
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, Severity
from openclaw_audit.models.openclaw import OpenClawConfig
from openclaw_audit.parsers.frontmatter import parse_frontmatter

CATEGORY = "Skill Security"

SKILL_SAMPLE = 10

NETWORK_MODULES = ("axios", "node-fetch", "got", "request", "http", "https", "net", "dgram", "ws", "socket.io")
SYSTEM_PATHS = ("/etc/", "/usr/", "/var/", "/sys/", "/proc/", "C:\\Windows", "C:\\Program Files", "HKEY_")
NATIVE_MODULES = ("node-gyp", "ffi-napi", "ref-napi", "bindings", "node-addon-api")
LOCKFILES = ("package-lock.json", "yarn.lock", "pnpm-lock.yaml")
CREDENTIAL_PATTERNS = (
    re.compile(r"process\.env\.[A-Z_]+"),
    re.compile(r"(?:api[_-]?key|password|secret|token)\s*[:=]\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"credentials?\s*[:=]", re.IGNORECASE),
)
EVAL_RE = re.compile(r"\beval\s*\(|new\s+Function\s*\(")
SHELL_TOOL_RE = re.compile(r"^(?:bash|shell|exec|sh|terminal|run_command)\b", re.IGNORECASE)


def _skill_name(package_path: str) -> str:
    return Path(package_path).parent.name


def _allowed_tools(metadata: dict[str, object]) -> list[str]:
    raw = metadata.get("allowed-tools", metadata.get("allowed_tools"))
    if isinstance(raw, str):
        return [item.strip() for item in re.split(r"[,\s]+", raw) if item.strip()]
    if isinstance(raw, list):
        return [str(item).strip() for item in raw]
    return []


def _package_findings(path: str) -> list[Finding]:
    package = load_package(path)
    if package is None:
        return []
    skill = _skill_name(path)
    deps = package_dependencies(package)
    findings: list[Finding] = []

    untrusted = [
        name
        for name, spec in deps.items()
        if spec.startswith("git+") or spec.startswith("http") or "github.com" in spec
    ]
    if untrusted:
        findings.append(
            Finding(
                id="SKILLS-001",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Skill uses untrusted dependency sources",
                description=f"{skill} pulls from git or URL sources: {', '.join(untrusted[:3])}",
                risk="Dependencies from URLs or git repos can change without notice",
                remediation="Use registry packages with pinned versions instead of git or URL sources",
                file=path,
            )
        )

    wildcard = [name for name, spec in deps.items() if spec in {"*", "latest"}]
    if wildcard:
        findings.append(
            Finding(
                id="SKILLS-002",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Skill has unpinned dependencies",
                description=f'{skill} uses "*" or "latest" for {len(wildcard)} dependencies',
                risk="Unpinned dependencies can introduce breaking changes or compromised releases",
                remediation="Pin all dependencies to specific versions",
                file=path,
            )
        )

    network = [name for name in deps if any(module in name for module in NETWORK_MODULES)]
    if network:
        findings.append(
            Finding(
                id="SKILLS-003",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Skill has network dependencies",
                description=f"{skill} includes network packages: {', '.join(network)}",
                risk="Skills with network access can exfiltrate data",
                remediation="Confirm network access is necessary and restrict outbound connections",
                file=path,
            )
        )

    directory = Path(path).parent
    if not any((directory / lockfile).exists() for lockfile in LOCKFILES):
        findings.append(
            Finding(
                id="SKILLS-006",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Skill has no lockfile",
                description=f"{skill} has no package-lock.json, yarn.lock or pnpm-lock.yaml",
                risk="Without a lockfile, dependency resolution is not reproducible",
                remediation="Generate a lockfile with npm install, yarn or pnpm install",
                file=path,
            )
        )

    native = [name for name in deps if any(module in name for module in NATIVE_MODULES)]
    scripts = package.get("scripts")
    install_script = scripts.get("install") if isinstance(scripts, dict) else None
    builds_native = isinstance(install_script, str) and "node-gyp" in install_script
    if native or package.get("gypfile") or builds_native:
        findings.append(
            Finding(
                id="SKILLS-008",
                severity=Severity.HIGH,
                category=CATEGORY,
                title="Skill loads native modules",
                description=f"{skill} uses native addons: {', '.join(native) or 'gyp build'}",
                risk="Native modules run outside the JavaScript sandbox with raw memory access",
                remediation="Use pure JavaScript alternatives where possible",
                file=path,
            )
        )
    return findings


def _skill_file_findings(paths: list[str]) -> list[Finding]:
    findings: list[Finding] = []
    seen: set[str] = set()
    for path in paths[:SKILL_SAMPLE]:
        content = read_text(path)
        if content is None:
            continue

        if "SKILLS-004" not in seen and any(marker in content for marker in SYSTEM_PATHS):
            seen.add("SKILLS-004")
            findings.append(
                Finding(
                    id="SKILLS-004",
                    severity=Severity.HIGH,
                    category=CATEGORY,
                    title="Skill references system paths",
                    description=f"{name_of(path)} references system directories (e.g. /etc/, C:\\Windows)",
                    risk="Skills that touch system files can compromise the host",
                    remediation="Restrict skill file access to the workspace directory",
                    file=path,
                )
            )

        if "SKILLS-007" not in seen and EVAL_RE.search(content):
            seen.add("SKILLS-007")
            findings.append(
                Finding(
                    id="SKILLS-007",
                    severity=Severity.HIGH,
                    category=CATEGORY,
                    title="Skill uses eval() or new Function()",
                    description=f"{name_of(path)} uses dynamic code evaluation",
                    risk="eval and Function allow arbitrary code execution within the skill",
                    remediation="Replace eval and Function with static code paths",
                    file=path,
                )
            )

        if "SKILLS-009" not in seen and any(pattern.search(content) for pattern in CREDENTIAL_PATTERNS):
            seen.add("SKILLS-009")
            findings.append(
                Finding(
                    id="SKILLS-009",
                    severity=Severity.HIGH,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Skill accesses credentials",
                    description=f"{name_of(path)} references environment variables, tokens or secrets",
                    risk="Skills with credential access can exfiltrate API keys",
                    remediation="Use a secrets manager and do not pass credentials to skills directly",
                    file=path,
                )
            )

        metadata = parse_frontmatter(content)
        shell_tools = [tool for tool in _allowed_tools(metadata or {}) if SHELL_TOOL_RE.match(tool)]
        if shell_tools:
            findings.append(
                Finding(
                    id="SKILLS-013",
                    severity=Severity.MEDIUM,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Skill grants shell access",
                    description=f"{name_of(Path(path).parent)} allows shell tools: {', '.join(shell_tools)}",
                    risk="A skill with shell access can run any command the agent can",
                    remediation="Narrow allowed-tools to specific commands or remove shell access",
                    file=path,
                )
            )
    return findings


def check_skills(
    config: OpenClawConfig,
    files: DiscoveredFiles,
    context: CheckContext,
) -> list[Finding]:
    findings: list[Finding] = []
    for path in files.skill_package_files[:SKILL_SAMPLE]:
        findings.extend(_package_findings(path))
    findings.extend(_skill_file_findings(files.skill_files))

    skills = config.skills
    if files.skill_files and not (skills and skills.sandboxed is True):
        findings.append(
            Finding(
                id="SKILLS-005",
                severity=Severity.MEDIUM,
                confidence=Confidence.MEDIUM,
                category=CATEGORY,
                title="Skills not sandboxed",
                description=f"{len(files.skill_files)} skills installed without sandbox isolation",
                risk="Unsandboxed skills can reach the host filesystem, network and environment",
                remediation="Set skills.sandboxed to true",
            )
        )

    if files.skill_files and not (skills and skills.verify_signatures is True):
        findings.append(
            Finding(
                id="SKILLS-010",
                severity=Severity.LOW,
                confidence=Confidence.LOW,
                category=CATEGORY,
                title="No skill signature verification",
                description="Installed skills are not verified against signatures or checksums",
                risk="Tampered skills load without detection",
                remediation="Set skills.verifySignatures to true",
            )
        )

    if skills and skills.auto_update is True:
        findings.append(
            Finding(
                id="SKILLS-011",
                severity=Severity.MEDIUM,
                category=CATEGORY,
                title="Skills auto-update enabled",
                description="Skills update automatically without manual review",
                risk="Automatic updates can pull in malicious code without notice",
                remediation="Disable skills.autoUpdate and review updates before applying them",
                file=files.config_path,
            )
        )

    if files.workspace_root:
        workspace_skills = [path for path in files.skill_files if is_within_root(path, files.workspace_root)]
        managed_skills = [path for path in files.skill_files if path not in workspace_skills]
        if workspace_skills and managed_skills:
            findings.append(
                Finding(
                    id="SKILLS-012",
                    severity=Severity.MEDIUM,
                    confidence=Confidence.MEDIUM,
                    category=CATEGORY,
                    title="Workspace skills may override managed skills",
                    description=(
                        f"{len(workspace_skills)} workspace skills alongside {len(managed_skills)} managed skills"
                    ),
                    risk="Workspace skills can shadow managed skills and change their behavior",
                    remediation="Make sure workspace skill names do not collide with managed skills",
                )
            )
    return findings
