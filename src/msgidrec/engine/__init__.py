"""Scan orchestration engine.

This package provides the entry points for usage/duplicate scans and
name/ID listing, including configuration and result types.
"""

from msgidrec.engine.config import ScanConfig, UsageReport
from msgidrec.engine.runner import list_names_and_ids, scan_usage

__all__ = [
    "ScanConfig",
    "UsageReport",
    "list_names_and_ids",
    "scan_usage",
]
