"""Macro expansion for declared values.

Macro references are written ``##name##``. Definitions may themselves
contain references, which are expanded recursively; unknown names are left
untouched.
"""

import re
from collections.abc import Mapping

__all__ = ["MACRO_RE", "MacroExpansionError", "MacroTable"]

MACRO_RE = re.compile(r"##([^#\s]+)##")


class MacroExpansionError(ValueError):
    """Raised when a macro definition refers back to itself."""

    def __init__(self, message: str, macro: str) -> None:
        super().__init__(message)
        self.macro = macro


class MacroTable:
    """Macro resolver backed by a name to value mapping.

    Names are matched case-sensitively.

    Attributes
    ----------
    definitions : dict[str, str]
        Macro name to replacement text.
    """

    def __init__(self, definitions: Mapping[str, str] | None = None) -> None:
        self.definitions: dict[str, str] = dict(definitions or {})
        self._cache: dict[str, str] = {}

    def expand(self, text: str) -> str:
        """Replace every known macro reference in text.

        Parameters
        ----------
        text : str
            Text possibly containing ``##name##`` references.

        Returns
        -------
        str
            Text with known references replaced.

        Raises
        ------
        MacroExpansionError
            If a definition is (indirectly) recursive.
        """
        if "##" not in text:
            return text
        return MACRO_RE.sub(lambda m: self._resolve(m.group(1), m.group(0), ()), text)

    def _resolve(self, name: str, reference: str, stack: tuple[str, ...]) -> str:
        if name not in self.definitions:
            return reference
        if name in self._cache:
            return self._cache[name]
        if name in stack:
            chain = " -> ".join((*stack, name))
            raise MacroExpansionError(f"Recursive macro reference: {chain}", macro=name)

        inner = (*stack, name)
        value = MACRO_RE.sub(
            lambda m: self._resolve(m.group(1), m.group(0), inner),
            self.definitions[name],
        )
        self._cache[name] = value
        return value
