"""Installation discovery."""

from openclaw_audit.discovery.finder import DiscoveryDiagnostics, discover, is_within_root, locate_root

__all__ = ["DiscoveryDiagnostics", "discover", "is_within_root", "locate_root"]
