"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from msgidrec.models import (  # noqa: E402
    TableCategory,
    TelemetryRow,
    TypeColumn,
    TypeDefinition,
)
from msgidrec.normalize import MacroTable  # noqa: E402
from msgidrec.sources import (  # noqa: E402
    DataField,
    ProjectSnapshot,
    ProjectTable,
    SchedulerSessions,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_ID_COLUMNS = (
    TypeColumn(user_name="Message ID", db_name="msg_id", input_type="message_id"),
    TypeColumn(user_name="Message Name", db_name="msg_name", input_type="message_id_name"),
)

STANDARD_TYPES = (
    TypeDefinition(name="Structure", columns=_ID_COLUMNS, category=TableCategory.STRUCTURE),
    TypeDefinition(name="Command", columns=_ID_COLUMNS, category=TableCategory.COMMAND),
    TypeDefinition(name="Limits", columns=_ID_COLUMNS, category=TableCategory.OTHER),
)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding project JSON fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def make_project() -> Callable[..., ProjectSnapshot]:
    """Factory for project snapshots with minimal boilerplate.

    Table types are fixed: "Structure", "Command" and "Limits" (other),
    each with a "msg_id" and a "msg_name" column.
    """

    def _factory(
        *,
        tables: Iterable[tuple[str, str, list[dict[str, str]]]] = (),
        fields: Iterable[tuple[str, str, str]] = (),
        telemetry: Iterable[tuple[str, str, str]] = (),
        reserved: Iterable[int] = (),
        macros: dict[str, str] | None = None,
        rates: dict[str, str] | None = None,
        scheduler: SchedulerSessions | None = None,
        protection_marker: str = "*",
    ) -> ProjectSnapshot:
        return ProjectSnapshot(
            reserved=list(reserved),
            macros=MacroTable(macros or {}),
            table_types=list(STANDARD_TYPES),
            tables=[
                ProjectTable(path=path, type_name=type_name, rows=tuple(rows))
                for path, type_name, rows in tables
            ],
            fields=[
                DataField(owner=owner, input_type=input_type, value=value)
                for owner, input_type, value in fields
            ],
            rates=dict(rates or {}),
            telemetry=[
                TelemetryRow(rate=rate, message=message, message_id=message_id)
                for rate, message, message_id in telemetry
            ],
            scheduler=scheduler,
            protection_marker=protection_marker,
        )

    return _factory
