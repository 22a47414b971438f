# SPDX-License-Identifier: MIT
"""Source positions inside build description files.

A SourceLocation points at one column of one line, and remembers whether
the column refers to the raw line, the line being expanded, or the line
after variable expansion. Diagnostics render a window of the line around
the column with a caret underneath.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass

# Number of characters shown on each side of the offending column.
CONTEXT_WIDTH = 30


class Phase(enum.Enum):
    """When, relative to variable expansion, a column was recorded."""

    BEFORE = "before variable expansion"
    DURING = "during variable expansion"
    AFTER = "after variable expansion"


@dataclass(frozen=True)
class SourceLocation:
    """A position in a description file.

    Attributes:
        file: Path of the description file as given to the interpreter.
        line: 1-based line number, 0 when unknown.
        column: 0-based column into ``source``.
        phase: Expansion phase ``source`` corresponds to.
        source: The text of the line, possibly after expansion.
    """

    file: str
    line: int = 0
    column: int = 0
    phase: Phase = Phase.BEFORE
    source: str = ""

    def at(self, column: int) -> SourceLocation:
        """Return the same location moved to another column."""
        return dataclasses.replace(self, column=column)

    def with_source(
        self, source: str, phase: Phase = Phase.BEFORE
    ) -> SourceLocation:
        """Return a location on the same line for a new rendition of it."""
        return dataclasses.replace(self, source=source, phase=phase, column=0)

    def render(self, message: str) -> str:
        """Format a diagnostic pointing at this location.

        Without source text the diagnostic is a single ``file:line: msg``
        line. Otherwise it shows the phase, up to 60 characters of the line
        around the column (elided with ``...``) and a caret line.
        """
        if not self.source:
            return f"{self}: {message}"

        start = max(0, self.column - CONTEXT_WIDTH)
        end = min(len(self.source), self.column + CONTEXT_WIDTH)
        window = self.source[start:end]
        if not window:
            return f"{self}: {message}"

        col = self.column - start
        text = f"{self}: {self.phase.value}\n\n"
        if start > 0:
            text += "... "
            col += 4
        text += window
        if end < len(self.source):
            text += "... "
        text += "\n" + " " * col + "^~~~~ " + message + "\n"
        return text

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"
