"""Audit logging subsystem for msgidrec.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: structured event record
"""

from msgidrec.audit.helpers import generate_run_id
from msgidrec.audit.logger import AuditLogger
from msgidrec.audit.models import LogEvent
from msgidrec.utils import get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_iso_timestamp",
]
