"""Positional pairing of message ID names with message IDs.

ID names and IDs are declared independently (separate columns or data
fields), so they are matched by relative position per owner: the first name
of an owner pairs with the first ID of that owner, and so on. Unmatched
names get a blank ID and unmatched IDs a blank name.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from msgidrec.models.records import InputType, NameIdRecord, SortOrder, TelemetryRow
from msgidrec.normalize.values import PROTECTED_MSG_ID_IDENT, remove_protection_flag
from msgidrec.sources.aggregator import collect_table_values

if TYPE_CHECKING:
    from msgidrec.sources.protocols import ProjectSources

__all__ = [
    "TELEMETRY_OWNER_PREFIX",
    "DEFAULT_SUB_MESSAGE_SUFFIX",
    "pair_positionally",
    "telemetry_name_records",
    "collapse_default_submessages",
    "sort_records",
    "pair_names_and_ids",
]

TELEMETRY_OWNER_PREFIX = "Tlm:"

# Suffix of the sub-message every parent message has by default
DEFAULT_SUB_MESSAGE_SUFFIX = "_0"
SECOND_SUB_MESSAGE_SUFFIX = "_1"


def pair_positionally(
    names: Iterable[tuple[str, str]],
    ids: Iterable[tuple[str, str]],
    *,
    hide_protection_marker: bool = False,
    marker: str = PROTECTED_MSG_ID_IDENT,
) -> list[NameIdRecord]:
    """Match ID names to IDs by position within each owner.

    Parameters
    ----------
    names : Iterable[tuple[str, str]]
        ``(owner, name)`` declarations in acquisition order.
    ids : Iterable[tuple[str, str]]
        ``(owner, id)`` declarations in acquisition order.
    hide_protection_marker : bool, optional
        Strip the protection marker from displayed IDs, by default False.
    marker : str, optional
        Protection marker, by default "*".

    Returns
    -------
    list[NameIdRecord]
        One record per name (in name order), then one record per leftover
        ID (in ID order).

    Examples
    --------
        >>> pair_positionally([("O1", "N1"), ("O1", "N2")], [("O1", "0x5")])
        [NameIdRecord(owner='O1', name='N1', id='0x5'), NameIdRecord(owner='O1', name='N2', id='')]
    """
    # Per-owner queues of indices into the ID list, preserving order
    id_list = list(ids)
    pending: dict[str, deque[int]] = defaultdict(deque)
    for index, (owner, _) in enumerate(id_list):
        pending[owner].append(index)

    consumed: set[int] = set()
    records: list[NameIdRecord] = []

    def display(raw_id: str) -> str:
        return remove_protection_flag(raw_id, marker) if hide_protection_marker else raw_id

    for owner, name in names:
        queue = pending.get(owner)
        if queue:
            index = queue.popleft()
            consumed.add(index)
            records.append(NameIdRecord(owner=owner, name=name, id=display(id_list[index][1])))
        else:
            records.append(NameIdRecord(owner=owner, name=name, id=""))

    for index, (owner, raw_id) in enumerate(id_list):
        if index not in consumed:
            records.append(NameIdRecord(owner=owner, name="", id=display(raw_id)))

    return records


def telemetry_name_records(rows: Iterable[TelemetryRow]) -> list[NameIdRecord]:
    """Convert persisted sub-message rows into name/ID records.

    Only rows whose message name contains a "." are used; the first "." is
    replaced by "_" so ``Msg.0`` becomes ``Msg_0``. One record is kept per
    distinct (id, name).
    """
    records: list[NameIdRecord] = []
    seen: set[tuple[str, str]] = set()

    for row in rows:
        if "." not in row.message:
            continue
        name = row.message.replace(".", "_", 1)
        key = (row.message_id, name)
        if key in seen:
            continue
        seen.add(key)
        records.append(
            NameIdRecord(owner=f"{TELEMETRY_OWNER_PREFIX}{row.rate}", name=name, id=row.message_id)
        )

    return records


def collapse_default_submessages(records: Sequence[NameIdRecord]) -> list[NameIdRecord]:
    """Show a parent with only its default sub-message under the parent name.

    ``Msg_0`` becomes ``Msg`` unless ``Msg_1`` is also present.
    """
    names = {record.name for record in records}
    collapsed: list[NameIdRecord] = []

    for record in records:
        if record.name.endswith(DEFAULT_SUB_MESSAGE_SUFFIX):
            parent = record.name[: -len(DEFAULT_SUB_MESSAGE_SUFFIX)]
            if parent + SECOND_SUB_MESSAGE_SUFFIX not in names:
                record = NameIdRecord(owner=record.owner, name=parent, id=record.id)
        collapsed.append(record)

    return collapsed


def sort_records(records: Iterable[NameIdRecord], order: SortOrder) -> list[NameIdRecord]:
    """Sort records by owner or by name (stable).

    Keys compare by Unicode code point, as Python orders strings, so
    case is significant and uppercase sorts before lowercase.
    """
    if order is SortOrder.BY_NAME:
        return sorted(records, key=lambda record: record.name)
    return sorted(records, key=lambda record: record.owner)


def pair_names_and_ids(
    sources: ProjectSources,
    sort_order: SortOrder = SortOrder.BY_OWNER,
    hide_protection_marker: bool = False,
    *,
    marker: str = PROTECTED_MSG_ID_IDENT,
) -> list[NameIdRecord]:
    """Build the sorted list of every message ID name, ID and owner.

    Names and IDs come from table columns and data fields (tables and
    groups); persisted telemetry sub-messages are appended with their
    default sub-message collapsed to the parent name.

    Parameters
    ----------
    sources : ProjectSources
        Project collaborators.
    sort_order : SortOrder, optional
        Sort by owner or name, by default by owner.
    hide_protection_marker : bool, optional
        Strip the protection marker from displayed IDs, by default False.
    marker : str, optional
        Protection marker, by default "*".

    Returns
    -------
    list[NameIdRecord]
        Display-ready records.
    """
    records = pair_positionally(
        collect_table_values(sources, InputType.MESSAGE_ID_NAME),
        collect_table_values(sources, InputType.MESSAGE_ID),
        hide_protection_marker=hide_protection_marker,
        marker=marker,
    )

    telemetry = collapse_default_submessages(telemetry_name_records(sources.telemetry_rows()))
    if hide_protection_marker:
        telemetry = [
            NameIdRecord(owner=r.owner, name=r.name, id=remove_protection_flag(r.id, marker))
            for r in telemetry
        ]
    records.extend(telemetry)

    return sort_records(records, SortOrder(sort_order))
