"""Scan configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from typing import Any

from msgidrec.models.records import DuplicateEntry
from msgidrec.normalize.values import PROTECTED_MSG_ID_IDENT, validate_marker


@dataclass
class ScanConfig:
    """Configuration for a message ID usage scan.

    Attributes
    ----------
    include_structures : bool
        Include IDs declared by tables representing structures.
    include_commands : bool
        Include IDs declared by tables representing commands.
    include_others : bool
        Include IDs declared by tables of any other type.
    include_groups : bool
        Include IDs declared by group data fields.
    use_persisted_telemetry : bool
        Read telemetry message IDs from the persisted scheduler table.
        If False, IDs come from the live scheduler sessions (if any).
    overwrite_self : bool
        Skip the active live session, whose IDs are being reassigned.
        Only used when reading live sessions.
    track_duplicates : bool
        Build the duplicate report in addition to the in-use set.
    protection_marker : str
        Trailing flag exempting an ID from automatic reassignment.
    """

    include_structures: bool = True
    include_commands: bool = True
    include_others: bool = True
    include_groups: bool = True
    use_persisted_telemetry: bool = True
    overwrite_self: bool = False
    track_duplicates: bool = False
    protection_marker: str = PROTECTED_MSG_ID_IDENT

    def __post_init__(self) -> None:
        """Validate the protection marker."""
        validate_marker(self.protection_marker)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class UsageReport:
    """Result of a usage scan.

    Attributes
    ----------
    in_use : set[int]
        Reserved IDs plus every ID declared by an included source.
    duplicates : list[DuplicateEntry]
        IDs declared by more than one owner, sorted by ID string. Empty
        unless duplicates were tracked.
    declarations : int
        Number of declarations forwarded to the tracker.
    """

    in_use: set[int] = field(default_factory=set)
    duplicates: list[DuplicateEntry] = field(default_factory=list)
    declarations: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "in_use": sorted(self.in_use),
            "duplicates": [entry.to_dict() for entry in self.duplicates],
            "declarations": self.declarations,
        }
