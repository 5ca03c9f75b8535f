"""Tests for scan orchestration."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from msgidrec.audit import AuditLogger
from msgidrec.engine import ScanConfig, list_names_and_ids, scan_usage
from msgidrec.models import LiveMessage, SortOrder
from msgidrec.normalize import MacroExpansionError, MalformedIdError
from msgidrec.sources import ProjectSnapshot, SchedulerSession, SchedulerSessions

ProjectFactory = Callable[..., ProjectSnapshot]


def _read_events(path: Path) -> list[dict]:
    with path.open() as f:
        return [json.loads(line) for line in f if line.strip()]


# ---------------------------------------------------------------------------
# ScanConfig
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_scan_config_defaults() -> None:
    """Test every source is included and persisted telemetry is used."""
    config = ScanConfig()

    assert config.include_structures
    assert config.include_commands
    assert config.include_others
    assert config.include_groups
    assert config.use_persisted_telemetry
    assert not config.overwrite_self
    assert not config.track_duplicates
    assert config.to_dict()["protection_marker"] == "*"


@pytest.mark.unit
def test_scan_config_rejects_bad_marker() -> None:
    """Test markers overlapping the ID grammar are refused."""
    with pytest.raises(ValueError):
        ScanConfig(protection_marker="0")


# ---------------------------------------------------------------------------
# scan_usage
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_scan_usage_duplicates(make_project: ProjectFactory) -> None:
    """Test the two-table duplicate scenario end to end."""
    project = make_project(
        tables=[
            ("TableA", "Structure", [{"msg_id": "0x10"}, {"msg_id": "0x20"}]),
            ("TableB", "Structure", [{"msg_id": "16"}]),
        ],
    )

    report = scan_usage(project, ScanConfig(track_duplicates=True))

    assert report.in_use == {0x10, 0x20}
    assert report.declarations == 3
    assert [entry.to_dict() for entry in report.duplicates] == [
        {"id": "0x10", "owners": ["Table: TableA", "Table: TableB"]}
    ]


@pytest.mark.unit
def test_scan_usage_without_tracking_has_no_duplicates(make_project: ProjectFactory) -> None:
    """Test the duplicate list stays empty unless requested."""
    project = make_project(
        tables=[("A", "Structure", [{"msg_id": "1"}]), ("B", "Structure", [{"msg_id": "1"}])],
    )

    assert scan_usage(project).duplicates == []


@pytest.mark.unit
def test_scan_usage_includes_reserved(make_project: ProjectFactory) -> None:
    """Test reserved IDs are in use even when nothing declares them."""
    project = make_project(reserved=[0x7FF])

    assert scan_usage(project).in_use == {0x7FF}


@pytest.mark.unit
def test_scan_usage_protected_value(make_project: ProjectFactory) -> None:
    """Test a protected declaration records its unmarked value."""
    project = make_project(tables=[("Cmd", "Command", [{"msg_id": "0x64 *"}])])

    report = scan_usage(project, ScanConfig(include_commands=False))

    assert report.in_use == {0x64}


@pytest.mark.unit
def test_scan_usage_live_ids_have_no_owner(make_project: ProjectFactory) -> None:
    """Test live IDs join the in-use set without becoming duplicates."""
    live = SchedulerSessions(
        sessions=[SchedulerSession("Rate 1", [LiveMessage("Msg1", "0x10")])],
    )
    project = make_project(tables=[("A", "Structure", [{"msg_id": "0x10"}])])
    config = ScanConfig(use_persisted_telemetry=False, track_duplicates=True)

    report = scan_usage(project, config, live)

    assert report.in_use == {0x10}
    assert report.duplicates == []


@pytest.mark.unit
def test_scan_usage_malformed_raises(make_project: ProjectFactory) -> None:
    """Test a malformed included declaration aborts the scan."""
    project = make_project(tables=[("Root", "Structure", [{"msg_id": "0xZZ*"}])])

    with pytest.raises(MalformedIdError, match="Table: Root"):
        scan_usage(project)


@pytest.mark.unit
def test_scan_usage_malformed_macro_reports_declared_text(make_project: ProjectFactory) -> None:
    """Test a macro expanding to a bad ID is reported as written in the table."""
    project = make_project(
        tables=[("Cmd", "Command", [{"msg_id": "##BAD##"}])],
        macros={"BAD": "0xZZ"},
    )

    with pytest.raises(MalformedIdError) as exc_info:
        scan_usage(project, ScanConfig())

    assert exc_info.value.raw_text == "##BAD##"
    assert exc_info.value.owner == "Table: Cmd"
    assert "##BAD##" in str(exc_info.value)


@pytest.mark.unit
def test_scan_usage_macro_telemetry_id(make_project: ProjectFactory) -> None:
    """Test telemetry IDs written as macros are expanded when parsed."""
    project = make_project(telemetry=[("Rate 1", "Msg1", "##TLM##")], macros={"TLM": "0x21"})

    assert scan_usage(project).in_use == {0x21}


@pytest.mark.unit
def test_scan_usage_excluded_malformed_is_ignored(make_project: ProjectFactory) -> None:
    """Test values dropped by the inclusion flags are never parsed."""
    project = make_project(tables=[("Root", "Structure", [{"msg_id": "garbage"}])])

    report = scan_usage(project, ScanConfig(include_structures=False))

    assert report.in_use == set()


@pytest.mark.unit
def test_scan_usage_recursive_macro_raises(make_project: ProjectFactory) -> None:
    """Test recursive macro definitions abort the scan."""
    project = make_project(
        tables=[("Root", "Structure", [{"msg_id": "##A##"}])],
        macros={"A": "##A##"},
    )

    with pytest.raises(MacroExpansionError):
        scan_usage(project)


@pytest.mark.unit
def test_scans_do_not_share_state(make_project: ProjectFactory) -> None:
    """Test consecutive scans over changed sources start fresh."""
    first = make_project(tables=[("A", "Structure", [{"msg_id": "1"}])])
    second = make_project(tables=[("A", "Structure", [{"msg_id": "2"}])])

    assert scan_usage(first).in_use == {1}
    assert scan_usage(second).in_use == {2}


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_scan_usage_logs_events(make_project: ProjectFactory, tmp_path: Path) -> None:
    """Test a scan logs start, collection, duplicates and finish."""
    project = make_project(
        tables=[("A", "Structure", [{"msg_id": "1"}]), ("B", "Structure", [{"msg_id": "1"}])],
    )
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(log_path, run_id="r1") as logger:
        scan_usage(project, ScanConfig(track_duplicates=True), logger=logger)

    events = _read_events(log_path)
    assert [e["event"] for e in events] == [
        "scan_started",
        "declarations_collected",
        "duplicate_found",
        "scan_finished",
    ]
    assert events[0]["data"]["parameters"]["track_duplicates"] is True
    assert events[2]["owner"] == "Table: B"
    assert events[-1]["data"]["counters"] == {"declarations": 2, "in_use": 1, "duplicates": 1}


@pytest.mark.unit
def test_scan_usage_logs_failure(make_project: ProjectFactory, tmp_path: Path) -> None:
    """Test a failed scan logs the error with its owner and re-raises."""
    project = make_project(tables=[("Root", "Structure", [{"msg_id": "bad"}])])
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(log_path) as logger, pytest.raises(MalformedIdError):
        scan_usage(project, logger=logger)

    events = _read_events(log_path)
    error = next(e for e in events if e["event"] == "error")
    assert error["data"]["exception_class"] == "MalformedIdError"
    assert error["owner"] == "Table: Root"
    assert events[-1]["data"]["status"] == "failed"


@pytest.mark.unit
def test_list_names_and_ids_logs_counters(make_project: ProjectFactory, tmp_path: Path) -> None:
    """Test the pairing stage reports blank names and IDs."""
    project = make_project(
        tables=[("A", "Structure", [{"msg_id": "1", "msg_name": "N"}, {"msg_name": "M"}])],
        fields=[("B", "message_id", "2")],
    )
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(log_path) as logger:
        records = list_names_and_ids(project, SortOrder.BY_NAME, logger=logger)

    assert [(r.name, r.id) for r in records] == [("", "2"), ("M", ""), ("N", "1")]
    finished = _read_events(log_path)[-1]
    assert finished["stage"] == "pairing"
    assert finished["data"]["counters"] == {"records": 3, "blank_ids": 1, "blank_names": 1}
