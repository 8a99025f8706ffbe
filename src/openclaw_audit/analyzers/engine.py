from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from openclaw_audit.checks.base import CheckContext
from openclaw_audit.checks.cloud_sync import check_cloud_sync
from openclaw_audit.checks.data_protection import check_data_protection
from openclaw_audit.checks.identity import check_identity
from openclaw_audit.checks.model import check_model
from openclaw_audit.checks.network import check_network
from openclaw_audit.checks.operational import check_operational
from openclaw_audit.checks.sandbox import check_sandbox
from openclaw_audit.checks.secrets import check_secrets
from openclaw_audit.checks.skills import check_skills
from openclaw_audit.checks.tools import check_tools
from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Finding
from openclaw_audit.models.openclaw import OpenClawConfig

logger = logging.getLogger(__name__)

CheckFn = Callable[[OpenClawConfig, DiscoveredFiles, CheckContext], list[Finding]]
Gate = Callable[[OpenClawConfig | None, DiscoveredFiles], bool]


@dataclass(frozen=True)
class Check:
    name: str
    run: CheckFn
    requires_config: bool = False
    when: Gate | None = None

    def applies(self, config: OpenClawConfig | None, files: DiscoveredFiles) -> bool:
        if self.requires_config and config is None:
            return False
        if self.when is not None:
            return self.when(config, files)
        return True


def _config_or_markdown(config: OpenClawConfig | None, files: DiscoveredFiles) -> bool:
    return config is not None or bool(files.workspace_markdown_files)


def _config_or_skills(config: OpenClawConfig | None, files: DiscoveredFiles) -> bool:
    return config is not None or bool(files.skill_files)


CHECKS: tuple[Check, ...] = (
    Check("identity", check_identity, requires_config=True),
    Check("network", check_network, requires_config=True),
    Check("sandbox", check_sandbox, requires_config=True),
    Check("secrets", check_secrets, when=_config_or_markdown),
    Check("model", check_model, requires_config=True),
    Check("tools", check_tools, requires_config=True),
    Check("skills", check_skills, when=_config_or_skills),
    Check("data_protection", check_data_protection),
    Check("operational", check_operational),
    Check("cloud_sync", check_cloud_sync),
)


def run_checks(
    config: OpenClawConfig | None,
    files: DiscoveredFiles,
    context: CheckContext,
    checks: tuple[Check, ...] = CHECKS,
) -> list[Finding]:
    """Run every applicable check in registry order and concatenate the results."""
    effective = config if config is not None else OpenClawConfig()
    findings: list[Finding] = []
    for check in checks:
        if not check.applies(config, files):
            logger.debug("skipping check category %s", check.name)
            continue
        try:
            produced = check.run(effective, files, context)
        except Exception:
            logger.exception("Check category %s failed", check.name)
            continue
        logger.debug("check category %s produced %s finding(s)", check.name, len(produced))
        findings.extend(produced)
    return findings
