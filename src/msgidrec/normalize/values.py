"""Message ID value normalization.

Turns raw ID text into a canonical signed integer. Order of operations:

1. Macro expansion (symbolic references resolved to text).
2. Protection marker detection and stripping (trailing annotation only).
3. Parsing as hexadecimal ("0x" prefix) or decimal, optionally signed.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING

from msgidrec.models.records import NormalizedId

if TYPE_CHECKING:
    from msgidrec.sources.protocols import MacroResolver

__all__ = [
    "PROTECTED_MSG_ID_IDENT",
    "MIN_MESSAGE_ID",
    "MAX_MESSAGE_ID",
    "MalformedIdError",
    "validate_marker",
    "remove_protection_flag",
    "is_protected",
    "parse_id_literal",
    "parse_message_id",
    "format_id_hex",
]

# Default flag appended to an ID that auto-assignment must not change
PROTECTED_MSG_ID_IDENT = "*"

MIN_MESSAGE_ID = -(2**31)
MAX_MESSAGE_ID = 2**31 - 1

ID_LITERAL_RE = re.compile(r"^([+-])?(?:0[xX]([0-9a-fA-F]+)|([0-9]+))$")

# Characters a marker may not contain since they belong to the ID grammar
_MARKER_FORBIDDEN_RE = re.compile(r"[0-9a-fA-FxX+\-\s]")


class MalformedIdError(ValueError):
    """Raised when a declared message ID is not a valid integer literal."""

    def __init__(
        self,
        message: str,
        raw_text: str,
        owner: str | None = None,
    ) -> None:
        """Initialize malformed ID error.

        Parameters
        ----------
        message : str
            Error message.
        raw_text : str
            Declared text as found in the source.
        owner : str | None, optional
            Display label of the declaring owner.
        """
        super().__init__(message)
        self.raw_text = raw_text
        self.owner = owner


def validate_marker(marker: str) -> str:
    """Check that a protection marker cannot be confused with ID text.

    Raises
    ------
    ValueError
        If the marker is empty or contains digits, hex letters, signs,
        "x" or whitespace.
    """
    if not marker:
        raise ValueError("protection marker must not be empty")
    if _MARKER_FORBIDDEN_RE.search(marker):
        raise ValueError(f"protection marker {marker!r} overlaps the ID literal grammar")
    return marker


@lru_cache(maxsize=16)
def _marker_suffix_re(marker: str) -> re.Pattern[str]:
    return re.compile(r"(?:\s*" + re.escape(marker) + r")+\s*$")


def remove_protection_flag(text: str, marker: str = PROTECTED_MSG_ID_IDENT) -> str:
    """Remove the trailing protection marker from ID text.

    Text without a trailing marker is returned unchanged, so the function
    is idempotent.

    Parameters
    ----------
    text : str
        ID text, e.g. "0x64 *".
    marker : str, optional
        Protection marker, by default "*".

    Returns
    -------
    str
        Text minus the marker and the whitespace preceding it.

    Examples
    --------
        >>> remove_protection_flag("0x64*")
        '0x64'
        >>> remove_protection_flag("0x64")
        '0x64'
    """
    return _marker_suffix_re(marker).sub("", text, count=1)


def is_protected(text: str, marker: str = PROTECTED_MSG_ID_IDENT) -> bool:
    """Check whether ID text carries the trailing protection marker."""
    return text.rstrip().endswith(marker)


def parse_id_literal(text: str) -> int | None:
    """Parse a hexadecimal or decimal integer literal.

    Parameters
    ----------
    text : str
        Literal text; surrounding whitespace is ignored.

    Returns
    -------
    int | None
        Parsed value, or None if the text is not a literal in the signed
        32-bit range.
    """
    match = ID_LITERAL_RE.match(text.strip())
    if match is None:
        return None

    sign, hex_digits, dec_digits = match.groups()
    value = int(hex_digits, 16) if hex_digits is not None else int(dec_digits, 10)
    if sign == "-":
        value = -value

    if not MIN_MESSAGE_ID <= value <= MAX_MESSAGE_ID:
        return None
    return value


def parse_message_id(
    raw_text: str,
    *,
    macros: MacroResolver | None = None,
    marker: str = PROTECTED_MSG_ID_IDENT,
    owner: str | None = None,
) -> NormalizedId:
    """Normalize raw message ID text into its canonical value.

    Parameters
    ----------
    raw_text : str
        Declared ID text, possibly containing macros and the marker.
    macros : MacroResolver | None, optional
        Resolver for embedded macro references.
    marker : str, optional
        Protection marker, by default "*".
    owner : str | None, optional
        Owner display label, used only in error messages.

    Returns
    -------
    NormalizedId
        Canonical value and protection flag.

    Raises
    ------
    MalformedIdError
        If the text minus the marker is not a valid integer literal.
    """
    text = macros.expand(raw_text) if macros is not None else raw_text
    protected = is_protected(text, marker)
    value = parse_id_literal(remove_protection_flag(text, marker))

    if value is None:
        location = f" (owner: {owner})" if owner else ""
        raise MalformedIdError(
            f"Malformed message ID {raw_text!r}{location}",
            raw_text=raw_text,
            owner=owner,
        )

    return NormalizedId(value=value, protected=protected)


def format_id_hex(value: int) -> str:
    """Format a canonical ID as "0x" + lowercase hex without leading zeros.

    Negative values are shown as their 32-bit two's complement.
    """
    if value < 0:
        value &= 0xFFFFFFFF
    return f"0x{value:x}"
