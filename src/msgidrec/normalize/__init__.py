"""Value normalization: macros, protection markers, ID parsing."""

from msgidrec.normalize.macros import MacroExpansionError, MacroTable
from msgidrec.normalize.paths import (
    get_prototype_name,
    is_group_owner,
    is_sub_message,
    strip_owner_prefix,
)
from msgidrec.normalize.values import (
    MAX_MESSAGE_ID,
    MIN_MESSAGE_ID,
    PROTECTED_MSG_ID_IDENT,
    MalformedIdError,
    format_id_hex,
    is_protected,
    parse_id_literal,
    parse_message_id,
    remove_protection_flag,
    validate_marker,
)

__all__ = [
    "MacroExpansionError",
    "MacroTable",
    "get_prototype_name",
    "is_group_owner",
    "is_sub_message",
    "strip_owner_prefix",
    "MAX_MESSAGE_ID",
    "MIN_MESSAGE_ID",
    "PROTECTED_MSG_ID_IDENT",
    "MalformedIdError",
    "format_id_hex",
    "is_protected",
    "parse_id_literal",
    "parse_message_id",
    "remove_protection_flag",
    "validate_marker",
]
