"""Collaborator protocols consumed by the aggregator and pairer.

The engine only specifies *which* values it needs (logical selections);
how a collaborator stores or queries them is its own concern.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from msgidrec.models.records import (
    InputType,
    LiveMessage,
    TableCategory,
    TelemetryRow,
    TypeColumn,
    TypeDefinition,
)

__all__ = [
    "ReservationSource",
    "TypeCatalog",
    "MacroResolver",
    "ProjectStore",
    "ProjectSources",
    "SchedulerSessionView",
    "LiveSessionProvider",
]


@runtime_checkable
class ReservationSource(Protocol):
    """Source of IDs excluded from automatic allocation."""

    def reserved_ids(self) -> Sequence[int]: ...


@runtime_checkable
class TypeCatalog(Protocol):
    """Catalog of table type definitions."""

    def type_definitions(self) -> Sequence[TypeDefinition]: ...


@runtime_checkable
class MacroResolver(Protocol):
    """Resolves symbolic references embedded in text."""

    def expand(self, text: str) -> str: ...


@runtime_checkable
class ProjectStore(Protocol):
    """Persisted project data.

    Row-returning methods yield ``(owner, value)`` pairs in creation order.
    """

    def column_values(self, type_name: str, column: TypeColumn) -> Sequence[tuple[str, str]]:
        """Return non-blank values of a column across all tables of a type."""
        ...

    def field_values(self, input_type: InputType) -> Sequence[tuple[str, str]]:
        """Return non-blank data-field values of the given input type."""
        ...

    def telemetry_rows(self) -> Sequence[TelemetryRow]:
        """Return every persisted telemetry scheduler message row."""
        ...

    def prototype_tables_of_type(self, category: TableCategory) -> Sequence[str]:
        """Return the prototype tables whose type belongs to a category."""
        ...

    def stream_name(self, rate: str) -> str:
        """Return the data-stream name for a rate column."""
        ...


@runtime_checkable
class ProjectSources(ReservationSource, TypeCatalog, MacroResolver, ProjectStore, Protocol):
    """Every persisted collaborator bundled together."""


@runtime_checkable
class SchedulerSessionView(Protocol):
    """One open scheduler session (data stream)."""

    @property
    def rate_name(self) -> str: ...

    @property
    def messages(self) -> Sequence[LiveMessage]: ...


@runtime_checkable
class LiveSessionProvider(Protocol):
    """Open scheduler with its sessions and the one being edited."""

    @property
    def sessions(self) -> Sequence[SchedulerSessionView]: ...

    @property
    def active_session(self) -> SchedulerSessionView | None: ...
