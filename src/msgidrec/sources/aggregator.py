"""Collect message ID declarations from every project source.

Sources, in collection order:

* table cells in columns tagged as message IDs, for every table type;
* data fields (table or group) of the message ID input type;
* telemetry messages, either persisted or from the open scheduler.

Only declarations that pass the inclusion flags are forwarded; an owner
that is not found in any classification list is simply excluded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from msgidrec.models.owners import OwnerKind, OwnerLabel, format_owner
from msgidrec.models.records import InputType, RawDeclaration, TableCategory
from msgidrec.normalize.paths import (
    get_prototype_name,
    is_group_owner,
    is_sub_message,
    strip_owner_prefix,
)
from msgidrec.normalize.values import is_protected, parse_message_id
from msgidrec.sources.live import iter_message_ids

if TYPE_CHECKING:
    from msgidrec.engine.config import ScanConfig
    from msgidrec.sources.protocols import LiveSessionProvider, ProjectSources

__all__ = [
    "Aggregation",
    "collect_declarations",
    "collect_table_values",
    "collect_telemetry_declarations",
    "collect_live_ids",
]


@dataclass
class Aggregation:
    """Declarations gathered for one scan.

    Attributes
    ----------
    declarations : list[RawDeclaration]
        Declarations forwarded to the tracker, as declared (macros unexpanded).
    structure_tables : list[str]
        Prototype tables representing structures.
    command_tables : list[str]
        Prototype tables representing commands.
    other_tables : list[str]
        Prototype tables of any other type.
    live_ids : list[int]
        IDs read from open scheduler sessions (no owner bookkeeping).
    excluded : int
        Table/field values dropped by the inclusion flags.
    """

    declarations: list[RawDeclaration] = field(default_factory=list)
    structure_tables: list[str] = field(default_factory=list)
    command_tables: list[str] = field(default_factory=list)
    other_tables: list[str] = field(default_factory=list)
    live_ids: list[int] = field(default_factory=list)
    excluded: int = 0

    def counters(self) -> dict[str, int]:
        """Summary counters for logging."""
        return {
            "declarations": len(self.declarations),
            "live_ids": len(self.live_ids),
            "excluded": self.excluded,
            "structure_tables": len(self.structure_tables),
            "command_tables": len(self.command_tables),
            "other_tables": len(self.other_tables),
        }


def collect_table_values(
    sources: ProjectSources,
    input_type: InputType,
) -> list[tuple[str, str]]:
    """Gather ``(owner, value)`` pairs from tagged columns and data fields.

    Column values come first (per type definition, per tagged column),
    followed by data-field values in creation order.

    Parameters
    ----------
    sources : ProjectSources
        Project collaborators.
    input_type : InputType
        MESSAGE_ID or MESSAGE_ID_NAME.

    Returns
    -------
    list[tuple[str, str]]
        Owner names (table paths or ``Group:<name>``) and raw values.
    """
    values: list[tuple[str, str]] = []

    for type_defn in sources.type_definitions():
        for column in type_defn.columns_by_input_type(input_type):
            values.extend(sources.column_values(type_defn.name, column))

    values.extend(sources.field_values(input_type))

    return [(owner, value) for owner, value in values if value.strip()]


def _classify(
    owner: str,
    value: str,
    config: ScanConfig,
    structures: frozenset[str],
    commands: frozenset[str],
    others: frozenset[str],
) -> OwnerLabel | None:
    """Return the label of an included owner, or None if excluded."""
    if is_group_owner(owner):
        label = OwnerLabel(OwnerKind.GROUP, strip_owner_prefix(owner))
    else:
        label = OwnerLabel(OwnerKind.TABLE, owner)

    if (
        is_protected(value, config.protection_marker)
        or (config.include_structures and get_prototype_name(owner) in structures)
        or (config.include_commands and owner in commands)
        or (config.include_others and owner in others)
        or (config.include_groups and label.kind is OwnerKind.GROUP)
    ):
        return label

    return None


def collect_telemetry_declarations(
    sources: ProjectSources,
    *,
    use_stream_names: bool,
) -> list[RawDeclaration]:
    """Read persisted telemetry message IDs.

    Sub-message rows (``parent.sub``) and rows without an ID are skipped;
    each ``(rate, message)`` pair is read once.

    Parameters
    ----------
    sources : ProjectSources
        Project collaborators.
    use_stream_names : bool
        Show the data-stream name instead of the rate name in owner keys.

    Returns
    -------
    list[RawDeclaration]
        MESSAGE declarations keyed "<rate or stream>, <message>".
    """
    declarations: list[RawDeclaration] = []
    seen: set[tuple[str, str]] = set()

    for row in sources.telemetry_rows():
        if not row.message_id.strip() or is_sub_message(row.message):
            continue

        pair = (row.rate, row.message)
        if pair in seen:
            continue
        seen.add(pair)

        rate = sources.stream_name(row.rate) if use_stream_names else row.rate
        declarations.append(
            RawDeclaration(
                owner=OwnerLabel(OwnerKind.MESSAGE, f"{rate}, {row.message}"),
                raw_text=row.message_id,
            )
        )

    return declarations


def collect_live_ids(
    live: LiveSessionProvider,
    *,
    overwrite_self: bool,
    sources: ProjectSources | None = None,
    marker: str,
) -> list[int]:
    """Parse the IDs of every open scheduler session.

    Parameters
    ----------
    live : LiveSessionProvider
        Open scheduler.
    overwrite_self : bool
        Skip the active session, whose IDs the user is reassigning.
    sources : ProjectSources | None, optional
        Used for macro expansion if given.
    marker : str
        Protection marker.

    Returns
    -------
    list[int]
        Canonical IDs in session order.

    Raises
    ------
    MalformedIdError
        If a live message declares an invalid ID.
    """
    ids: list[int] = []
    active = live.active_session

    for session in live.sessions:
        if overwrite_self and session is active:
            continue

        for name, raw_id in iter_message_ids(session.messages):
            owner = format_owner(OwnerLabel(OwnerKind.MESSAGE, f"{session.rate_name}, {name}"))
            normalized = parse_message_id(raw_id, macros=sources, marker=marker, owner=owner)
            ids.append(normalized.value)

    return ids


def collect_declarations(
    sources: ProjectSources,
    config: ScanConfig,
    live: LiveSessionProvider | None = None,
) -> Aggregation:
    """Collect every included message ID declaration.

    Parameters
    ----------
    sources : ProjectSources
        Project collaborators.
    config : ScanConfig
        Inclusion flags and telemetry mode.
    live : LiveSessionProvider | None, optional
        Open scheduler; read only when persisted telemetry is not used.

    Returns
    -------
    Aggregation
        Forwarded declarations, classification lists and live IDs.
    """
    result = Aggregation(
        structure_tables=list(sources.prototype_tables_of_type(TableCategory.STRUCTURE)),
        command_tables=list(sources.prototype_tables_of_type(TableCategory.COMMAND)),
        other_tables=list(sources.prototype_tables_of_type(TableCategory.OTHER)),
    )
    structures = frozenset(result.structure_tables)
    commands = frozenset(result.command_tables)
    others = frozenset(result.other_tables)

    for owner, value in collect_table_values(sources, InputType.MESSAGE_ID):
        expanded = sources.expand(value)
        label = _classify(owner, expanded, config, structures, commands, others)
        if label is None:
            result.excluded += 1
            continue
        result.declarations.append(RawDeclaration(owner=label, raw_text=value))

    if config.use_persisted_telemetry:
        result.declarations.extend(
            collect_telemetry_declarations(sources, use_stream_names=config.track_duplicates)
        )
    elif live is not None:
        result.live_ids = collect_live_ids(
            live,
            overwrite_self=config.overwrite_self,
            sources=sources,
            marker=config.protection_marker,
        )

    return result
