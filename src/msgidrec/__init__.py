"""Message ID reconciliation for command and telemetry table definitions.

This package provides:
- Data models (msgidrec.models): owners, declarations, duplicate entries
- Normalization (msgidrec.normalize): macros, protection markers, ID parsing
- Sources (msgidrec.sources): collaborator protocols, project snapshot, aggregation
- Tracking (msgidrec.tracking): in-use set, duplicate map, ID allocation
- Pairing (msgidrec.pairing): positional name/ID pairing
- Engine (msgidrec.engine): scan orchestration
- Audit (msgidrec.audit): structured event logging
- CLI (msgidrec.cli): command-line interface
- Public API (msgidrec.api): high-level convenience functions
"""

__version__ = "0.4.0"
__license__ = "MIT"

from msgidrec.api import allocate_ids, list_project_names, scan_project
from msgidrec.engine import ScanConfig, UsageReport, list_names_and_ids, scan_usage
from msgidrec.models import DuplicateEntry, NameIdRecord, OwnerKind, OwnerLabel, SortOrder
from msgidrec.normalize import (
    MacroExpansionError,
    MalformedIdError,
    parse_message_id,
    remove_protection_flag,
)
from msgidrec.pairing import pair_names_and_ids
from msgidrec.sources import ProjectFileError, ProjectSnapshot, load_project

__all__ = [
    "__version__",
    "__license__",
    "allocate_ids",
    "list_project_names",
    "scan_project",
    "ScanConfig",
    "UsageReport",
    "list_names_and_ids",
    "scan_usage",
    "DuplicateEntry",
    "NameIdRecord",
    "OwnerKind",
    "OwnerLabel",
    "SortOrder",
    "MacroExpansionError",
    "MalformedIdError",
    "parse_message_id",
    "remove_protection_flag",
    "pair_names_and_ids",
    "ProjectFileError",
    "ProjectSnapshot",
    "load_project",
]
