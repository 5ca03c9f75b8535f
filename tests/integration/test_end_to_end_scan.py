"""Integration tests for end-to-end scans over a project file.

The fixture project covers structure, command, other and group owners,
macros, reserved ranges, persisted telemetry and open scheduler sessions.
"""

import json
from pathlib import Path

import jsonschema
import pytest

from msgidrec import ScanConfig, list_project_names, load_project, scan_project
from msgidrec.audit import AuditLogger
from msgidrec.engine import scan_usage

PERSISTED_IN_USE = {0x0, 0x1, 0x2, 0x3, 0x7FF, 0x1800, 0x1801, 0x1900, 0x1A00, 0x1C00}


@pytest.fixture
def project_file(fixtures_dir: Path) -> Path:
    """Path to the fixture project."""
    return fixtures_dir / "project.json"


@pytest.mark.integration
def test_persisted_scan(project_file: Path) -> None:
    """Test the default scan over persisted data."""
    report = scan_project(project_file)

    assert report.in_use == PERSISTED_IN_USE
    assert report.declarations == 8


@pytest.mark.integration
def test_duplicate_report(project_file: Path) -> None:
    """Test duplicates list owners in discovery order with stream names."""
    report = scan_project(project_file, ScanConfig(track_duplicates=True))

    assert report.in_use == PERSISTED_IN_USE
    assert [entry.to_dict() for entry in report.duplicates] == [
        {"id": "0x1800", "owners": ["Table: HK_Tlm", "Message: Stream A, Msg2"]},
        {"id": "0x1801", "owners": ["Table: Power_Tlm", "Table: Sys_Cmd", "Group: Thermal"]},
    ]
    assert report.duplicates[1].owner_text.splitlines()[-1] == "Group: Thermal"


@pytest.mark.integration
def test_live_scan(project_file: Path) -> None:
    """Test live sessions replace persisted telemetry."""
    config = ScanConfig(use_persisted_telemetry=False)

    report = scan_project(project_file, config, use_live_sessions=True)

    assert report.in_use == (PERSISTED_IN_USE - {0x1C00}) | {0x1D00, 0x1E00, 0x1E01}


@pytest.mark.integration
def test_live_scan_overwrite_self(project_file: Path) -> None:
    """Test the active session's IDs are ignored when overwriting them."""
    config = ScanConfig(use_persisted_telemetry=False, overwrite_self=True)

    report = scan_project(project_file, config, use_live_sessions=True)

    assert 0x1D00 not in report.in_use
    assert {0x1E00, 0x1E01} <= report.in_use


@pytest.mark.integration
def test_names_listing(project_file: Path) -> None:
    """Test the full name/ID listing sorted by owner."""
    records = list_project_names(project_file, hide_protection_marker=True)

    assert [(r.owner, r.name, r.id) for r in records] == [
        ("Group:Thermal", "THERM_MID", "0x1801"),
        ("HK_Tlm", "HK_TLM_MID", "##HK_MID##"),
        ("HK_Tlm", "HK_STATUS_MID", ""),
        ("Orphan_Table", "", "0x1b00"),
        ("Power_Tlm", "PWR_TLM_MID", "0x1801"),
        ("Sensor_Limits", "", "0x1a00"),
        ("Sys_Cmd", "SYS_CMD_MID", "0x1801"),
        ("Sys_Cmd", "", "0x1900"),
        ("Tlm:Rate 1", "Msg1", "0x1c00"),
        ("Tlm:Rate 1", "Msg2_0", "0x1800"),
        ("Tlm:Rate 1", "Msg2_1", "0x1c01"),
    ]


@pytest.mark.integration
def test_scan_is_repeatable(project_file: Path) -> None:
    """Test repeated scans of unchanged sources give equal results."""
    config = ScanConfig(track_duplicates=True)

    first = scan_project(project_file, config)
    second = scan_project(project_file, config)

    assert first.to_dict() == second.to_dict()


@pytest.mark.integration
def test_logged_scan_events_validate(project_file: Path, tmp_path: Path) -> None:
    """Test a full logged scan emits schema-valid events."""
    schema_dir = Path(__file__).parents[2] / "src" / "msgidrec" / "schemas"
    schema = json.loads((schema_dir / "log_event.schema.json").read_text(encoding="utf-8"))
    log_path = tmp_path / "events.jsonl"
    project = load_project(project_file)

    with AuditLogger(log_path, run_id="integration") as logger:
        scan_usage(project, ScanConfig(track_duplicates=True), logger=logger)

    events = [json.loads(line) for line in log_path.read_text().splitlines()]
    for event in events:
        jsonschema.validate(instance=event, schema=schema)
    assert events[-1]["data"]["counters"] == {"declarations": 8, "in_use": 10, "duplicates": 2}
