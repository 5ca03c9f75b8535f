"""Allocation of free message IDs and reserved-range parsing."""

from collections.abc import Iterable, Set

from msgidrec.normalize.values import MAX_MESSAGE_ID, parse_id_literal

__all__ = ["MAX_RESERVED_RANGE", "next_free_ids", "parse_reserved_ranges"]

# Largest number of IDs a single reserved range may span
MAX_RESERVED_RANGE = 0x10000


def next_free_ids(
    in_use: Set[int],
    count: int = 1,
    *,
    start: int = 0,
    stop: int = MAX_MESSAGE_ID,
    step: int = 1,
) -> list[int]:
    """Return the first IDs in a range that are not in use.

    Parameters
    ----------
    in_use : Set[int]
        IDs already reserved or declared.
    count : int, optional
        Number of IDs to allocate, by default 1.
    start : int, optional
        First candidate ID, by default 0.
    stop : int, optional
        Last candidate ID (inclusive), by default the largest 32-bit ID.
    step : int, optional
        Candidate increment, by default 1.

    Returns
    -------
    list[int]
        Allocated IDs in ascending candidate order.

    Raises
    ------
    ValueError
        If the arguments are invalid or the range holds too few free IDs.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    if start > stop:
        raise ValueError(f"start ({start}) must not exceed stop ({stop})")

    allocated: list[int] = []
    candidate = start
    while len(allocated) < count:
        if candidate > stop:
            raise ValueError(
                f"Only {len(allocated)} of {count} free IDs available in "
                f"[{start:#x}, {stop:#x}]"
            )
        if candidate not in in_use:
            allocated.append(candidate)
        candidate += step

    return allocated


def parse_reserved_ranges(entries: Iterable[int | str]) -> list[int]:
    """Expand reserved ID entries into individual IDs.

    Entries are integers, ID literals ("0x1a", "26"), or inclusive ranges
    ("0x10-0x1f") of at most ``MAX_RESERVED_RANGE`` IDs.

    Raises
    ------
    ValueError
        If an entry is not a literal or a valid range, or a range is too
        large.
    """
    ids: list[int] = []

    for entry in entries:
        if isinstance(entry, int):
            ids.append(entry)
            continue

        low_text, sep, high_text = entry.partition("-")
        # A leading "-" is a sign, not a range separator
        if sep and low_text.strip():
            low = parse_id_literal(low_text)
            high = parse_id_literal(high_text)
            if low is None or high is None or low > high:
                raise ValueError(f"Invalid reserved ID range: {entry!r}")
            if high - low + 1 > MAX_RESERVED_RANGE:
                raise ValueError(
                    f"Reserved ID range {entry!r} spans {high - low + 1} IDs "
                    f"(limit {MAX_RESERVED_RANGE})"
                )
            ids.extend(range(low, high + 1))
            continue

        value = parse_id_literal(entry)
        if value is None:
            raise ValueError(f"Invalid reserved ID: {entry!r}")
        ids.append(value)

    return ids
