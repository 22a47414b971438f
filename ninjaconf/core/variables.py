# SPDX-License-Identifier: MIT
"""Variable store for build descriptions.

Every variable records whether it has been expanded at least once. At
the end of a full parse, variables that were defined but never expanded
are reported together.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ninjaconf.util.source_location import SourceLocation


@dataclass
class Variable:
    """A variable value and its usage flag."""

    value: str
    used: bool = False
    location: SourceLocation | None = None


class VariableStore:
    """Name to Variable mapping, in definition order."""

    def __init__(self) -> None:
        self._variables: dict[str, Variable] = {}

    def add(
        self,
        name: str,
        value: str,
        *,
        used: bool = False,
        force: bool = True,
        location: SourceLocation | None = None,
    ) -> None:
        """Define a variable.

        Args:
            name: Variable name.
            value: Variable value.
            used: Initial usage flag.
            force: Overwrite an existing definition. When False, the
                first definition wins and later ones are ignored.
            location: Where the definition was read.
        """
        if not force and name in self._variables:
            return
        self._variables[name] = Variable(value, used, location)

    def expand(self, name: str) -> str | None:
        """Return the value of ``name`` and mark it used, None if unknown."""
        variable = self._variables.get(name)
        if variable is None:
            return None
        variable.used = True
        return variable.value

    def names(self) -> list[str]:
        return list(self._variables)

    def used_names(self) -> list[str]:
        return [n for n, v in self._variables.items() if v.used]

    def unused_names(self) -> list[str]:
        return [n for n, v in self._variables.items() if not v.used]

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)
