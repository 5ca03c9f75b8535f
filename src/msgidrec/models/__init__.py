"""Core data models for message ID reconciliation."""

from msgidrec.models.owners import (
    GROUP_DATA_FIELD_IDENT,
    OwnerKind,
    OwnerLabel,
    format_owner,
)
from msgidrec.models.records import (
    DuplicateEntry,
    InputType,
    LiveMessage,
    NameIdRecord,
    NormalizedId,
    RawDeclaration,
    SortOrder,
    TableCategory,
    TelemetryRow,
    TypeColumn,
    TypeDefinition,
)

__all__ = [
    "GROUP_DATA_FIELD_IDENT",
    "OwnerKind",
    "OwnerLabel",
    "format_owner",
    "DuplicateEntry",
    "InputType",
    "LiveMessage",
    "NameIdRecord",
    "NormalizedId",
    "RawDeclaration",
    "SortOrder",
    "TableCategory",
    "TelemetryRow",
    "TypeColumn",
    "TypeDefinition",
]
