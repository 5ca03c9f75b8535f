"""Usage and duplicate tracking, plus free-ID allocation."""

from msgidrec.tracking.allocation import MAX_RESERVED_RANGE, next_free_ids, parse_reserved_ranges
from msgidrec.tracking.tracker import UsageTracker

__all__ = [
    "UsageTracker",
    "MAX_RESERVED_RANGE",
    "next_free_ids",
    "parse_reserved_ranges",
]
