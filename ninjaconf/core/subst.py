# SPDX-License-Identifier: MIT
"""Variable substitution.

Substitution rules:

- ``$$`` is a literal ``$``.
- ``${EXPR}`` substitutes ``EXPR`` first and uses the result as the
  variable name, so names can be computed (``${LIB_${ARCH}}``).
- ``$NAME`` reads the name up to the next ``$`` or blank. A ``$``
  terminating the name is consumed, a blank is kept.

Expanding a variable marks it used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ninjaconf.core.errors import SubstitutionError, UndefinedVariableError
from ninjaconf.util.source_location import Phase
from ninjaconf.util.strings import closest_matches, did_you_mean

if TYPE_CHECKING:
    from ninjaconf.core.variables import VariableStore
    from ninjaconf.util.source_location import SourceLocation

_BLANKS = " \t\r\n\v\f"


def _closing_brace(text: str, start: int) -> int:
    """Index of the '}' closing the '${' whose content begins at start."""
    depth = 1
    i = start
    while i < len(text):
        if text[i] == "$" and i + 1 < len(text) and text[i + 1] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def substitute(
    text: str,
    location: SourceLocation,
    variables: VariableStore,
    *,
    echo_unknown: bool = False,
) -> str:
    """Expand variable references in ``text``.

    Args:
        text: Text to expand.
        location: Location of ``text``, used for diagnostics.
        variables: Variables to read (usage flags are updated).
        echo_unknown: Copy unknown names instead of failing. Used when
            only listing the variables a description declares.

    Returns:
        The expanded text.

    Raises:
        SubstitutionError: On a dangling ``$`` or an unclosed ``${``.
        UndefinedVariableError: On an unknown variable.
    """
    loc = location.with_source(text, Phase.DURING)
    out: list[str] = []
    n = len(text)
    i = 0
    while i < n:
        c = text[i]
        if c != "$":
            out.append(c)
            i += 1
            continue
        if i + 1 >= n:
            raise SubstitutionError("unexpected end of line", loc.at(i + 1))
        if text[i + 1] == "$":
            out.append("$")
            i += 2
            continue

        if text[i + 1] == "{":
            end = _closing_brace(text, i + 2)
            if end < 0:
                raise SubstitutionError("cannot find closing '}'", loc.at(i + 1))
            key = substitute(
                text[i + 2 : end], location, variables, echo_unknown=echo_unknown
            )
        else:
            end = i + 1
            while end < n and text[end] != "$" and text[end] not in _BLANKS:
                end += 1
            key = text[i + 1 : end]

        value = variables.expand(key)
        if value is None:
            if not echo_unknown:
                suggestions = closest_matches(key, variables.names())
                message = did_you_mean(
                    f'don\'t know how to expand this: "{key}"', key, suggestions
                )
                raise UndefinedVariableError(message, key, suggestions, loc.at(i))
            value = key
        out.append(value)
        if end < n and text[end] in _BLANKS:
            out.append(text[end])
        i = end + 1
    return "".join(out)
