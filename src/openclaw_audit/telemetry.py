"""Opt-in upload of anonymized scan results.

Only finding ids, severities and categories leave the machine. File paths,
descriptions and any other text stay local.
"""

from __future__ import annotations

import getpass
import hashlib
import logging
import socket

import httpx

from openclaw_audit.models.reports import ScanResult, ThreatReport, ThreatSignature, UploadResult

logger = logging.getLogger(__name__)

UPLOAD_TIMEOUT_S = 5.0
REPORTS_PATH = "/v1/reports"


def instance_id() -> str:
    """Stable, non-reversible identifier for this machine and user."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "unknown"
    seed = f"{socket.gethostname()}:{user}"
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:16]


def anonymize(result: ScanResult, version: str) -> ThreatReport:
    return ThreatReport(
        version=version,
        timestamp=result.timestamp,
        instance_id=instance_id(),
        platform=result.platform,
        score=result.score,
        checks_run=result.checks_run,
        finding_count=len(result.findings),
        findings=[
            ThreatSignature(id=item.id, severity=item.severity.value, category=item.category)
            for item in result.findings
        ],
    )


def upload_report(
    result: ScanResult,
    api_url: str,
    *,
    version: str = "0+unknown",
    client: httpx.Client | None = None,
) -> UploadResult:
    """POST the anonymized report. Failures are returned, never raised."""
    report = anonymize(result, version)
    url = f"{api_url.rstrip('/')}{REPORTS_PATH}"
    owns_client = client is None
    http = client or httpx.Client(timeout=UPLOAD_TIMEOUT_S)
    try:
        response = http.post(
            url,
            content=report.model_dump_json(by_alias=True),
            headers={"Content-Type": "application/json"},
            timeout=UPLOAD_TIMEOUT_S,
        )
    except httpx.HTTPError as exc:
        logger.info("report upload failed: %s", exc)
        return UploadResult(success=False, error=f"Upload failed: {exc}")
    finally:
        if owns_client:
            http.close()

    if response.is_success:
        logger.info("report uploaded to %s", url)
        return UploadResult(success=True)
    return UploadResult(success=False, error=f"Upload rejected (status={response.status_code})")
