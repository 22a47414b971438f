# SPDX-License-Identifier: MIT
"""Custom exceptions for ninjaconf.

All ninjaconf exceptions inherit from NinjaconfError, which carries an
optional source location. When the location holds the text of the line,
the message is rendered with a window of that line and a caret under the
offending column.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ninjaconf.util.source_location import SourceLocation


class NinjaconfError(Exception):
    """Base class for all ninjaconf exceptions.

    Attributes:
        message: The error message.
        location: Optional source location where the error occurred.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return self.location.render(self.message)
        return self.message


class ParseError(NinjaconfError):
    """Malformed build description.

    Every diagnostic about the content of a description file is a
    ParseError, from tokenizing to closing rules.
    """


class SubstitutionError(ParseError):
    """Error during variable substitution."""


class UndefinedVariableError(SubstitutionError):
    """Referenced variable does not exist.

    Attributes:
        variable: The name that could not be expanded.
        suggestions: Known names closest to it.
    """

    def __init__(
        self,
        message: str,
        variable: str,
        suggestions: list[str],
        location: SourceLocation | None = None,
    ) -> None:
        self.variable = variable
        self.suggestions = suggestions
        super().__init__(message, location)


class DuplicateTargetError(ParseError):
    """Two rules claim the same target.

    Attributes:
        target: The target name.
        first_location: Where the target was first defined.
    """

    def __init__(
        self,
        target: str,
        first_location: SourceLocation | None,
        location: SourceLocation | None = None,
    ) -> None:
        self.target = target
        self.first_location = first_location
        message = f"rule name '{target}' already defined"
        if first_location is not None:
            message += f" at line {first_location.line}"
            if location is None or location.file != first_location.file:
                message += f" of {first_location.file}"
        super().__init__(message, location)


class IncludeCycleError(ParseError):
    """A description file includes itself, directly or not.

    Attributes:
        chain: The include stack, outermost first, ending with the
            file included again.
    """

    def __init__(
        self,
        chain: list[str],
        location: SourceLocation | None = None,
    ) -> None:
        self.chain = chain
        super().__init__(
            "circular include: " + " -> ".join(chain),
            location,
        )


class UnusedVariablesError(NinjaconfError):
    """Variables defined but never expanded.

    Reported once per run with every offending variable.

    Attributes:
        names: Unused variable names, in definition order.
    """

    def __init__(self, names: list[str], lines: list[str]) -> None:
        self.names = names
        super().__init__("\n".join(lines))


class ConfigureError(NinjaconfError):
    """Error while probing the host.

    Raised when a required program, header or library cannot be found,
    or when a helper process fails.
    """


class ToolchainError(ConfigureError):
    """A compiler cannot be detected, run or identified."""


class ToolNotFoundError(ConfigureError):
    """A required program, header or library is missing.

    Attributes:
        kind: What was looked for ("Program", "Header", "Library").
        name: The name that was looked for.
    """

    def __init__(
        self,
        kind: str,
        name: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} '{name}' not found", location)


class GenerateError(NinjaconfError):
    """Error while writing a backend build file."""
