# SPDX-License-Identifier: MIT
"""Tokenizer for build description lines.

A line is split on blanks. Text between double quotes is kept verbatim
as part of the current token, ``\\"`` is kept as is, and ``#`` ends the
line. Each token remembers the column where it starts.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from ninjaconf.core.errors import ParseError
from ninjaconf.util.source_location import SourceLocation

_BLANKS = " \t\r\n\v\f"

_PREFIX_RE = re.compile(r"^\[(.)(?::(.))?\]$")


class Action(enum.Enum):
    """How the command translator treats a line.

    PERMISSIVE translates what it can and passes unknown options through,
    TRANSLATE fails on anything it cannot translate, RAW copies tokens.
    """

    PERMISSIVE = "P"
    TRANSLATE = "T"
    RAW = "R"


@dataclass(frozen=True)
class Token:
    """One word of a description line."""

    text: str
    location: SourceLocation

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class LinePrefix:
    """Decoded ``[X]`` or ``[X:A]`` line prefix.

    Attributes:
        os: 'L' (Linux and other POSIX hosts), 'W' (Windows) or '*'.
        action: Translation mode for the line.
        present: Whether the line carried a prefix at all.
    """

    os: str = "*"
    action: Action = Action.TRANSLATE
    present: bool = False

    def matches(self, os_letter: str) -> bool:
        return self.os == "*" or self.os == os_letter


def tokenize(text: str, location: SourceLocation) -> list[Token]:
    """Split one line into tokens.

    Args:
        text: The line, after variable expansion when it applies.
        location: Location of the line; its source is replaced by ``text``.

    Returns:
        The tokens, with locations pointing at their first column.

    Raises:
        ParseError: On an unterminated double quote.
    """
    loc = location if location.source == text else location.with_source(
        text, location.phase
    )
    tokens: list[Token] = []
    buf: list[str] = []
    start = -1
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == "#":
            break
        if c in _BLANKS:
            if start >= 0:
                tokens.append(Token("".join(buf), loc.at(start)))
                buf = []
                start = -1
        elif c == '"':
            if start < 0:
                start = i
            end = text.find('"', i + 1)
            if end < 0:
                raise ParseError("cannot find ending double-quote", loc.at(i))
            buf.append(text[i + 1 : end])
            i = end
        else:
            if start < 0:
                start = i
            if c == "\\" and i + 1 < n and text[i + 1] == '"':
                buf.append('\\"')
                i += 1
            else:
                buf.append(c)
        i += 1
    if start >= 0:
        tokens.append(Token("".join(buf), loc.at(start)))
    return tokens


def parse_line_prefix(tokens: list[Token]) -> LinePrefix:
    """Decode the optional ``[X]``/``[X:A]`` prefix of a token list.

    The prefix token, when present, is not removed from ``tokens``.

    Raises:
        ParseError: If the OS letter or the action letter is unknown.
    """
    if not tokens:
        return LinePrefix()
    head = tokens[0]
    match = _PREFIX_RE.match(head.text)
    if match is None:
        return LinePrefix()
    os_letter, action_letter = match.group(1), match.group(2)
    if os_letter not in ("L", "W", "*"):
        raise ParseError(
            "expected 'L', 'W' or '*'", head.location.at(head.location.column + 1)
        )
    if action_letter is None:
        return LinePrefix(os_letter, Action.TRANSLATE, True)
    try:
        action = Action(action_letter)
    except ValueError:
        raise ParseError(
            "expected 'P', 'T' or 'R'", head.location.at(head.location.column + 3)
        ) from None
    return LinePrefix(os_letter, action, True)
