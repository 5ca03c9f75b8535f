"""Scan orchestration.

Usage scan flow:
    1. Seed a fresh tracker with the reserved IDs.
    2. Collect included declarations (tables, fields, telemetry).
    3. Normalize each declaration and record it in the tracker.
    4. Add IDs from live scheduler sessions without owner bookkeeping.

State is created per call and returned; nothing is kept between scans.
A scan either completes or raises, in which case no partial result is
returned.
"""

import time
from collections.abc import Callable
from typing import TypeVar

from msgidrec.audit.logger import AuditLogger
from msgidrec.engine.config import ScanConfig, UsageReport
from msgidrec.models.owners import format_owner
from msgidrec.models.records import NameIdRecord, SortOrder
from msgidrec.normalize.values import PROTECTED_MSG_ID_IDENT, parse_message_id
from msgidrec.pairing.pairer import pair_names_and_ids
from msgidrec.sources.aggregator import collect_declarations
from msgidrec.sources.protocols import LiveSessionProvider, ProjectSources
from msgidrec.tracking.tracker import UsageTracker

__all__ = ["scan_usage", "list_names_and_ids"]

T = TypeVar("T")


def _logged(
    logger: AuditLogger | None,
    stage: str,
    parameters: dict,
    run: Callable[[], T],
    counters: Callable[[T], dict[str, int]],
) -> T:
    """Run a stage, logging start, finish and any error."""
    if logger is None:
        return run()

    start = time.perf_counter()
    logger.scan_started(stage, parameters)
    try:
        result = run()
    except Exception as e:
        logger.error(type(e).__name__, str(e), stage=stage, owner=getattr(e, "owner", None))
        logger.scan_finished("failed", time.perf_counter() - start)
        raise

    logger.scan_finished("success", time.perf_counter() - start, counters(result))
    return result


def _run_scan(
    sources: ProjectSources,
    config: ScanConfig,
    live: LiveSessionProvider | None,
    logger: AuditLogger | None,
) -> UsageReport:
    tracker = UsageTracker(sources.reserved_ids())

    aggregation = collect_declarations(sources, config, live)
    if logger:
        logger.declarations_collected(aggregation.counters())

    for declaration in aggregation.declarations:
        normalized = parse_message_id(
            declaration.raw_text,
            macros=sources,
            marker=config.protection_marker,
            owner=format_owner(declaration.owner),
        )
        entry = tracker.record(declaration.owner, normalized.value, config.track_duplicates)
        if entry is not None and logger:
            logger.duplicate_found(entry.id_display, [format_owner(o) for o in entry.owners])

    for live_id in aggregation.live_ids:
        tracker.add_in_use(live_id)

    return UsageReport(
        in_use=tracker.in_use,
        duplicates=tracker.duplicates() if config.track_duplicates else [],
        declarations=len(aggregation.declarations),
    )


def scan_usage(
    sources: ProjectSources,
    config: ScanConfig | None = None,
    live: LiveSessionProvider | None = None,
    *,
    logger: AuditLogger | None = None,
) -> UsageReport:
    """Build the set of message IDs in use and, optionally, the duplicates.

    Parameters
    ----------
    sources : ProjectSources
        Project collaborators.
    config : ScanConfig | None, optional
        Inclusion flags and modes; defaults to ``ScanConfig()``.
    live : LiveSessionProvider | None, optional
        Open scheduler, used when persisted telemetry is not.
    logger : AuditLogger | None, optional
        Event logger.

    Returns
    -------
    UsageReport
        In-use set and duplicate entries.

    Raises
    ------
    MalformedIdError
        If an included declaration is not a valid ID.
    """
    if config is None:
        config = ScanConfig()

    return _logged(
        logger,
        "scan",
        config.to_dict(),
        lambda: _run_scan(sources, config, live, logger),
        lambda report: {
            "declarations": report.declarations,
            "in_use": len(report.in_use),
            "duplicates": len(report.duplicates),
        },
    )


def list_names_and_ids(
    sources: ProjectSources,
    sort_order: SortOrder = SortOrder.BY_OWNER,
    hide_protection_marker: bool = False,
    *,
    marker: str = PROTECTED_MSG_ID_IDENT,
    logger: AuditLogger | None = None,
) -> list[NameIdRecord]:
    """Pair message ID names with IDs, with optional audit logging.

    See ``msgidrec.pairing.pair_names_and_ids`` for the pairing rules.
    """
    return _logged(
        logger,
        "pairing",
        {
            "sort_order": str(sort_order),
            "hide_protection_marker": hide_protection_marker,
            "protection_marker": marker,
        },
        lambda: pair_names_and_ids(
            sources, SortOrder(sort_order), hide_protection_marker, marker=marker
        ),
        lambda records: {
            "records": len(records),
            "blank_ids": sum(1 for r in records if not r.id),
            "blank_names": sum(1 for r in records if not r.name),
        },
    )
