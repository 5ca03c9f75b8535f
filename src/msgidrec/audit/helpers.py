"""Helper utilities for audit logging.

For timestamp utilities, see msgidrec.utils.
"""

import secrets
from datetime import UTC, datetime

__all__ = [
    "generate_run_id",
]


def generate_run_id() -> str:
    """Generate unique run identifier.

    Returns
    -------
    str
        Run ID in format: ISO8601_timestamp__random_suffix.
    """
    timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    suffix = secrets.token_hex(4)
    return f"{timestamp}__{suffix}"
