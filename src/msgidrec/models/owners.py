"""Owner labels for message ID declarations."""

from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "GROUP_DATA_FIELD_IDENT",
    "OwnerKind",
    "OwnerLabel",
    "format_owner",
]

# Prefix carried by data-field owner names that belong to a group
GROUP_DATA_FIELD_IDENT = "Group:"


class OwnerKind(StrEnum):
    """Kind of entity that declares a message ID.

    Attributes
    ----------
    TABLE : str
        Table cell or table data field.
    GROUP : str
        Group data field.
    MESSAGE : str
        Telemetry message.
    """

    TABLE = "Table"
    GROUP = "Group"
    MESSAGE = "Message"


@dataclass(frozen=True, slots=True)
class OwnerLabel:
    """Tagged owner of a message ID.

    Two labels denote the same owner iff kind and key are equal.

    Attributes
    ----------
    kind : OwnerKind
        Owner kind.
    key : str
        Table path, group name, or "<stream>, <message>" for telemetry.
    """

    kind: OwnerKind
    key: str

    def __str__(self) -> str:
        return format_owner(self)


def format_owner(owner: OwnerLabel) -> str:
    """Format an owner label for display.

    Parameters
    ----------
    owner : OwnerLabel
        Owner to format.

    Returns
    -------
    str
        Display text, e.g. "Table: Root,Child.var".
    """
    return f"{owner.kind.value}: {owner.key}"
