from __future__ import annotations

import sys

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from openclaw_audit.models.findings import Finding

CHECKS_RUN = 100


class ScanResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    timestamp: str
    tool_version: str | None = None
    score: int = Field(ge=0, le=100)
    findings: list[Finding] = Field(default_factory=list)
    suggestions: list[Finding] = Field(default_factory=list)
    files_scanned: int = 0
    checks_run: int = CHECKS_RUN
    checks_passed: int = CHECKS_RUN
    duration_ms: int = 0
    platform: str = sys.platform


class ThreatSignature(BaseModel):
    id: str
    severity: str
    category: str


class ThreatReport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str
    timestamp: str
    instance_id: str
    platform: str
    score: int
    checks_run: int
    finding_count: int
    findings: list[ThreatSignature] = Field(default_factory=list)


class UploadResult(BaseModel):
    success: bool
    error: str | None = None
