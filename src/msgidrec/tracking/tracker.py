"""Usage and duplicate tracking for canonical message IDs."""

from collections.abc import Iterable

from msgidrec.models.owners import OwnerLabel
from msgidrec.models.records import DuplicateEntry
from msgidrec.normalize.values import format_id_hex

__all__ = ["UsageTracker"]


class UsageTracker:
    """Builds the in-use set and the duplicate map for one scan.

    A tracker is created per scan and never reused; the sources it reads
    may change arbitrarily between scans.

    Attributes
    ----------
    in_use : set[int]
        Reserved IDs plus every first-seen declared ID.
    """

    def __init__(self, reserved: Iterable[int] = ()) -> None:
        """Initialize tracker seeded with reserved IDs.

        Parameters
        ----------
        reserved : Iterable[int], optional
            IDs excluded from allocation regardless of declaration.
        """
        self.in_use: set[int] = set(reserved)
        self._first_owner: dict[int, OwnerLabel] = {}
        self._duplicates: dict[int, DuplicateEntry] = {}

    def add_in_use(self, canonical_id: int) -> None:
        """Mark an ID as used without owner bookkeeping."""
        self.in_use.add(canonical_id)

    def record(
        self,
        owner: OwnerLabel,
        canonical_id: int,
        track_duplicates: bool,
    ) -> DuplicateEntry | None:
        """Record one declaration.

        Parameters
        ----------
        owner : OwnerLabel
            Declaring owner.
        canonical_id : int
            Normalized ID value.
        track_duplicates : bool
            Whether to maintain the duplicate map.

        Returns
        -------
        DuplicateEntry | None
            The entry created or extended by this declaration, if any.
        """
        if canonical_id not in self.in_use:
            self.in_use.add(canonical_id)
            if track_duplicates:
                self._first_owner[canonical_id] = owner
            return None

        if not track_duplicates:
            return None

        entry = self._duplicates.get(canonical_id)
        if entry is None:
            first = self._first_owner.get(canonical_id)
            # Reserved IDs have no declaring owner
            if first is None:
                self._first_owner[canonical_id] = owner
                return None

            entry = DuplicateEntry(id_display=format_id_hex(canonical_id), owners=[first])
            self._duplicates[canonical_id] = entry
            entry.add_owner(owner)
            return entry

        return entry if entry.add_owner(owner) else None

    def duplicates(self) -> list[DuplicateEntry]:
        """Return duplicate entries sorted by their ID string."""
        return sorted(self._duplicates.values(), key=lambda entry: entry.id_display)
