"""Domain models."""

from openclaw_audit.models.files import DiscoveredFiles
from openclaw_audit.models.findings import Confidence, Finding, FixType, Severity
from openclaw_audit.models.openclaw import OpenClawConfig
from openclaw_audit.models.reports import ScanResult, ThreatReport, ThreatSignature, UploadResult

__all__ = [
    "Confidence",
    "DiscoveredFiles",
    "Finding",
    "FixType",
    "OpenClawConfig",
    "ScanResult",
    "Severity",
    "ThreatReport",
    "ThreatSignature",
    "UploadResult",
]
