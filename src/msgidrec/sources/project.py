"""In-memory project snapshot loadable from a JSON document.

A snapshot implements every persisted collaborator the engine consumes
(reservations, table types, column/field values, telemetry rows, rate to
stream mapping, macros) and optionally carries open scheduler sessions.
"""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema.exceptions import best_match

from msgidrec.models.records import (
    InputType,
    TableCategory,
    TelemetryRow,
    TypeColumn,
    TypeDefinition,
)
from msgidrec.normalize.macros import MacroTable
from msgidrec.normalize.paths import get_prototype_name
from msgidrec.normalize.values import PROTECTED_MSG_ID_IDENT, validate_marker
from msgidrec.sources.live import SchedulerSessions
from msgidrec.tracking.allocation import parse_reserved_ranges

__all__ = [
    "DataField",
    "ProjectFileError",
    "ProjectSnapshot",
    "ProjectTable",
    "load_project",
    "project_schema",
]


class ProjectFileError(ValueError):
    """Raised when a project document is invalid."""

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize project file error.

        Parameters
        ----------
        message : str
            Error message.
        path : str | None, optional
            JSON pointer-like location of the offending value.
        """
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class ProjectTable:
    """A table instance and its rows.

    Attributes
    ----------
    path : str
        Table path (``Root`` or ``Root,Type.var``).
    type_name : str
        Table type name.
    rows : tuple[dict[str, str], ...]
        Rows keyed by column storage name.
    """

    path: str
    type_name: str
    rows: tuple[dict[str, str], ...] = ()


@dataclass(frozen=True)
class DataField:
    """A data field attached to a table or a group."""

    owner: str
    input_type: str
    value: str


@dataclass
class ProjectSnapshot:
    """In-memory project data.

    Attributes
    ----------
    reserved : list[int]
        Reserved message IDs.
    macros : MacroTable
        Macro definitions.
    table_types : list[TypeDefinition]
        Table type definitions.
    tables : list[ProjectTable]
        Table instances in creation order.
    fields : list[DataField]
        Data fields in creation order.
    rates : dict[str, str]
        Rate column name to data-stream name.
    telemetry : list[TelemetryRow]
        Persisted telemetry scheduler rows.
    scheduler : SchedulerSessions | None
        Open scheduler sessions, if any.
    protection_marker : str
        Marker flagging protected IDs in this project.
    """

    reserved: list[int] = field(default_factory=list)
    macros: MacroTable = field(default_factory=MacroTable)
    table_types: list[TypeDefinition] = field(default_factory=list)
    tables: list[ProjectTable] = field(default_factory=list)
    fields: list[DataField] = field(default_factory=list)
    rates: dict[str, str] = field(default_factory=dict)
    telemetry: list[TelemetryRow] = field(default_factory=list)
    scheduler: SchedulerSessions | None = None
    protection_marker: str = PROTECTED_MSG_ID_IDENT

    def __post_init__(self) -> None:
        """Validate the marker and index table types by name."""
        validate_marker(self.protection_marker)
        self._types_by_name = {t.name: t for t in self.table_types}

    # -- ReservationSource ---------------------------------------------------

    def reserved_ids(self) -> Sequence[int]:
        return list(self.reserved)

    # -- TypeCatalog ---------------------------------------------------------

    def type_definitions(self) -> Sequence[TypeDefinition]:
        return list(self.table_types)

    # -- MacroResolver -------------------------------------------------------

    def expand(self, text: str) -> str:
        return self.macros.expand(text)

    # -- ProjectStore --------------------------------------------------------

    def column_values(self, type_name: str, column: TypeColumn) -> Sequence[tuple[str, str]]:
        values: list[tuple[str, str]] = []
        for table in self.tables:
            if table.type_name != type_name:
                continue
            for row in table.rows:
                value = row.get(column.db_name, "")
                if value.strip():
                    values.append((table.path, value))
        return values

    def field_values(self, input_type: InputType) -> Sequence[tuple[str, str]]:
        return [
            (data_field.owner, data_field.value)
            for data_field in self.fields
            if data_field.input_type == input_type and data_field.value.strip()
        ]

    def telemetry_rows(self) -> Sequence[TelemetryRow]:
        return list(self.telemetry)

    def prototype_tables_of_type(self, category: TableCategory) -> Sequence[str]:
        names: list[str] = []
        for table in self.tables:
            type_defn = self._types_by_name.get(table.type_name)
            if type_defn is None or type_defn.category != category:
                continue
            prototype = get_prototype_name(table.path)
            if prototype not in names:
                names.append(prototype)
        return names

    def stream_name(self, rate: str) -> str:
        # Unknown rates are shown under their own name
        return self.rates.get(rate, rate)

    # -- Construction --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectSnapshot":
        """Build a snapshot from a schema-valid project document.

        Raises
        ------
        ProjectFileError
            If the document fails schema validation or holds invalid values.
        """
        validate_project(data)

        try:
            reserved = parse_reserved_ranges(data.get("reserved_ids", []))
            scheduler = (
                SchedulerSessions.from_dict(data["scheduler"]) if "scheduler" in data else None
            )
            return cls(
                reserved=reserved,
                macros=MacroTable(data.get("macros", {})),
                table_types=[_type_from_dict(t) for t in data.get("table_types", [])],
                tables=[
                    ProjectTable(
                        path=t["path"],
                        type_name=t["type"],
                        rows=tuple(t.get("rows", [])),
                    )
                    for t in data.get("tables", [])
                ],
                fields=[
                    DataField(owner=f["owner"], input_type=f["input_type"], value=f["value"])
                    for f in data.get("fields", [])
                ],
                rates=dict(data.get("rates", {})),
                telemetry=[
                    TelemetryRow(rate=t["rate"], message=t["message"], message_id=t.get("id", ""))
                    for t in data.get("telemetry", [])
                ],
                scheduler=scheduler,
                protection_marker=data.get("protection_marker", PROTECTED_MSG_ID_IDENT),
            )
        except ValueError as e:
            raise ProjectFileError(f"Invalid project document: {e}") from e


def _type_from_dict(data: Mapping[str, Any]) -> TypeDefinition:
    return TypeDefinition(
        name=data["name"],
        category=TableCategory(data["category"]),
        columns=tuple(
            TypeColumn(
                user_name=c["name"],
                db_name=c.get("db_name", c["name"]),
                input_type=c["input_type"],
            )
            for c in data.get("columns", [])
        ),
    )


@lru_cache(maxsize=1)
def project_schema() -> dict[str, Any]:
    """Load the bundled project document JSON schema."""
    resource = files("msgidrec") / "schemas" / "project.schema.json"
    return json.loads(resource.read_text(encoding="utf-8"))


def validate_project(data: Mapping[str, Any]) -> None:
    """Validate a project document against the bundled schema.

    Raises
    ------
    ProjectFileError
        With the location of the most relevant violation.
    """
    validator = jsonschema.Draft202012Validator(project_schema())
    error = best_match(validator.iter_errors(data))
    if error is not None:
        location = "/" + "/".join(str(p) for p in error.absolute_path)
        raise ProjectFileError(f"{location}: {error.message}", path=location)


def load_project(path: str | Path) -> ProjectSnapshot:
    """Load a project snapshot from a JSON file.

    Parameters
    ----------
    path : str | Path
        Path to the project JSON document.

    Returns
    -------
    ProjectSnapshot
        Loaded snapshot.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ProjectFileError
        If the file is not valid JSON or fails validation.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")

    with file_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ProjectFileError(f"{file_path.name} is not valid JSON: {e}") from e

    return ProjectSnapshot.from_dict(data)
