"""Data records exchanged between the aggregator, tracker and pairer.

Collaborator-facing records (type definitions, telemetry rows, live
scheduler messages) live here as well so that every subpackage shares one
vocabulary.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from msgidrec.models.owners import OwnerKind, OwnerLabel, format_owner

__all__ = [
    "InputType",
    "TableCategory",
    "SortOrder",
    "RawDeclaration",
    "NormalizedId",
    "DuplicateEntry",
    "NameIdRecord",
    "TypeColumn",
    "TypeDefinition",
    "TelemetryRow",
    "LiveMessage",
]


class InputType(StrEnum):
    """Input data types that mark a column or data field as ID-bearing."""

    MESSAGE_ID = "message_id"
    MESSAGE_ID_NAME = "message_id_name"


class TableCategory(StrEnum):
    """Table type categories used to classify declaration owners."""

    STRUCTURE = "structure"
    COMMAND = "command"
    OTHER = "other"


class SortOrder(StrEnum):
    """Sort order for the name/ID list."""

    BY_OWNER = "owner"
    BY_NAME = "name"


@dataclass(frozen=True, slots=True)
class RawDeclaration:
    """A single raw message ID declaration.

    Attributes
    ----------
    owner : OwnerLabel
        Declaring owner.
    raw_text : str
        Declared text as found in the source, macros unexpanded.
    """

    owner: OwnerLabel
    raw_text: str

    @property
    def kind(self) -> OwnerKind:
        return self.owner.kind


@dataclass(frozen=True, slots=True)
class NormalizedId:
    """Canonical value of a message ID plus its protection flag."""

    value: int
    protected: bool = False


@dataclass
class DuplicateEntry:
    """A message ID declared by more than one owner.

    Attributes
    ----------
    id_display : str
        ID formatted as "0x" + lowercase hex.
    owners : list[OwnerLabel]
        Distinct owners in first-seen order.
    """

    id_display: str
    owners: list[OwnerLabel] = field(default_factory=list)

    def add_owner(self, owner: OwnerLabel) -> bool:
        """Append an owner unless already present.

        Returns
        -------
        bool
            True if the owner was appended.
        """
        if owner in self.owners:
            return False
        self.owners.append(owner)
        return True

    @property
    def owner_text(self) -> str:
        """Owners as newline-separated display labels."""
        return "\n".join(format_owner(owner) for owner in self.owners)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id_display,
            "owners": [format_owner(owner) for owner in self.owners],
        }


@dataclass(frozen=True, slots=True)
class NameIdRecord:
    """One row of the name/ID list.

    A blank name or id marks an unmatched leftover.
    """

    owner: str
    name: str
    id: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {"owner": self.owner, "name": self.name, "id": self.id}


@dataclass(frozen=True)
class TypeColumn:
    """Column of a table type.

    Attributes
    ----------
    user_name : str
        Column name shown to the user.
    db_name : str
        Column name in storage.
    input_type : str
        Input data type name (see InputType).
    """

    user_name: str
    db_name: str
    input_type: str


@dataclass(frozen=True)
class TypeDefinition:
    """Table type definition with its columns."""

    name: str
    columns: tuple[TypeColumn, ...] = ()
    category: TableCategory = TableCategory.OTHER

    def columns_by_input_type(self, input_type: InputType) -> list[TypeColumn]:
        """Return the columns tagged with the given input type."""
        return [column for column in self.columns if column.input_type == input_type]


@dataclass(frozen=True, slots=True)
class TelemetryRow:
    """Persisted telemetry scheduler row.

    Attributes
    ----------
    rate : str
        Rate column name.
    message : str
        Message name; sub-messages are named "<parent>.<index>".
    message_id : str
        Declared ID text, possibly blank.
    """

    rate: str
    message: str
    message_id: str


@dataclass
class LiveMessage:
    """Message held in an open scheduler session.

    Attributes
    ----------
    name : str
        Message name.
    id : str
        Declared ID text, possibly blank.
    sub_messages : list[LiveMessage]
        Sub-messages of this message.
    """

    name: str
    id: str = ""
    sub_messages: list["LiveMessage"] = field(default_factory=list)
