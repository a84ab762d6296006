"""Source discovery and scheduling call-site scanning."""

from scan.call_sites import scan_call_sites
from scan.files import find_source_files

__all__ = ["find_source_files", "scan_call_sites"]
