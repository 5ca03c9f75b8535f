"""Owner path helpers.

Table paths have the form ``Root,Type.var,Type2.var2``: the root table
followed by the data type and variable name of each nested instance.
"""

from msgidrec.models.owners import GROUP_DATA_FIELD_IDENT

__all__ = [
    "get_prototype_name",
    "is_group_owner",
    "strip_owner_prefix",
    "is_sub_message",
]


def get_prototype_name(table_path: str) -> str:
    """Return the prototype table name of a table path.

    Examples
    --------
        >>> get_prototype_name("Root,Struct.var")
        'Struct'
        >>> get_prototype_name("Root")
        'Root'
    """
    last = table_path.rsplit(",", 1)[-1]
    return last.split(".", 1)[0]


def is_group_owner(owner_name: str) -> bool:
    """Check whether a data-field owner name denotes a group."""
    return owner_name.startswith(GROUP_DATA_FIELD_IDENT)


def strip_owner_prefix(owner_name: str) -> str:
    """Drop everything through the last colon of an owner name.

    ``Group:Power`` becomes ``Power``; names without a colon are unchanged.
    """
    return owner_name.rsplit(":", 1)[-1]


def is_sub_message(message_name: str) -> bool:
    """Check whether a message name has the ``parent.sub`` form."""
    return "." in message_name[1:]
