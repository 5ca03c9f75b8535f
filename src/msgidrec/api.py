"""Public API for message ID reconciliation.

This module provides high-level convenience functions, enabling:
- Scanning a project file for IDs in use and duplicate IDs
- Listing message ID names paired with their IDs
- Allocating free IDs
"""

from __future__ import annotations

from pathlib import Path

from msgidrec.audit.logger import AuditLogger
from msgidrec.engine.config import ScanConfig, UsageReport
from msgidrec.engine.runner import list_names_and_ids, scan_usage
from msgidrec.models.records import NameIdRecord, SortOrder
from msgidrec.sources.project import ProjectSnapshot, load_project
from msgidrec.tracking.allocation import next_free_ids

__all__ = [
    "scan_project",
    "list_project_names",
    "allocate_ids",
]


def _open_logger(log_path: str | Path | None) -> AuditLogger | None:
    return AuditLogger(Path(log_path)) if log_path is not None else None


def _resolve(project: str | Path | ProjectSnapshot) -> ProjectSnapshot:
    if isinstance(project, ProjectSnapshot):
        return project
    return load_project(project)


def scan_project(
    project: str | Path | ProjectSnapshot,
    config: ScanConfig | None = None,
    *,
    use_live_sessions: bool = False,
    log_path: str | Path | None = None,
) -> UsageReport:
    """Scan a project for message IDs in use and duplicates.

    Parameters
    ----------
    project : str | Path | ProjectSnapshot
        Project JSON file or loaded snapshot.
    config : ScanConfig | None, optional
        Scan configuration. If None, defaults are used with the project's
        protection marker.
    use_live_sessions : bool, optional
        Pass the project's scheduler sessions as the live session set,
        by default False. Only takes effect when the config does not use
        persisted telemetry.
    log_path : str | Path | None, optional
        Append audit events to this JSONL file.

    Returns
    -------
    UsageReport
        In-use IDs and duplicate entries.

    Raises
    ------
    FileNotFoundError
        If the project file does not exist.
    ProjectFileError
        If the project file is invalid.
    MalformedIdError
        If an included declaration is not a valid ID.

    Examples
    --------
        >>> from msgidrec import ScanConfig, scan_project
        >>> report = scan_project("project.json", ScanConfig(track_duplicates=True))
        >>> for entry in report.duplicates:
        ...     print(entry.id_display, entry.owner_text)
    """
    snapshot = _resolve(project)
    if config is None:
        config = ScanConfig(protection_marker=snapshot.protection_marker)

    live = snapshot.scheduler if use_live_sessions else None

    logger = _open_logger(log_path)
    try:
        return scan_usage(snapshot, config, live, logger=logger)
    finally:
        if logger is not None:
            logger.close()


def list_project_names(
    project: str | Path | ProjectSnapshot,
    sort_order: SortOrder | str = SortOrder.BY_OWNER,
    *,
    hide_protection_marker: bool = False,
    log_path: str | Path | None = None,
) -> list[NameIdRecord]:
    """List every message ID name with its ID and owner.

    Parameters
    ----------
    project : str | Path | ProjectSnapshot
        Project JSON file or loaded snapshot.
    sort_order : SortOrder | str, optional
        "owner" or "name", by default "owner".
    hide_protection_marker : bool, optional
        Strip the protection marker from displayed IDs.
    log_path : str | Path | None, optional
        Append audit events to this JSONL file.

    Returns
    -------
    list[NameIdRecord]
        Sorted records.
    """
    snapshot = _resolve(project)

    logger = _open_logger(log_path)
    try:
        return list_names_and_ids(
            snapshot,
            SortOrder(sort_order),
            hide_protection_marker,
            marker=snapshot.protection_marker,
            logger=logger,
        )
    finally:
        if logger is not None:
            logger.close()


def allocate_ids(
    project: str | Path | ProjectSnapshot,
    count: int = 1,
    *,
    start: int = 0,
    config: ScanConfig | None = None,
) -> list[int]:
    """Allocate IDs that collide with no reserved or declared ID.

    Parameters
    ----------
    project : str | Path | ProjectSnapshot
        Project JSON file or loaded snapshot.
    count : int, optional
        Number of IDs, by default 1.
    start : int, optional
        First candidate ID, by default 0.
    config : ScanConfig | None, optional
        Scan configuration used to build the in-use set.

    Returns
    -------
    list[int]
        Free IDs in ascending order.
    """
    report = scan_project(project, config)
    return next_free_ids(report.in_use, count, start=start)
