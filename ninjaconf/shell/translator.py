# SPDX-License-Identifier: MIT
"""Command line translation.

A command line of a rule is written once, in a host neutral dialect, and
translated here into the command the host shell runs. Lines are split on
shell operators; each simple command is a built-in verb, a conditional,
a compiler invocation or, in permissive and raw modes, passed through.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ParseError
from ninjaconf.core.tokenizer import Action
from ninjaconf.toolchains.compilers import translate_compiler
from ninjaconf.toolchains.toolchain import COMPILER_HEADS

if TYPE_CHECKING:
    from ninjaconf.core.tokenizer import Token
    from ninjaconf.shell.commands import Shell
    from ninjaconf.toolchains.registry import ToolchainRegistry
    from ninjaconf.toolchains.toolchain import Family

logger = logging.getLogger(__name__)

SEPARATORS = frozenset({"&&", "||", "|", ";", ">", ">>", "<"})
REDIRECTIONS = frozenset({">", ">>", "<"})


@dataclass
class TranslatedCommand:
    """Result of translating one command line.

    Attributes:
        text: The host command line.
        autodeps_family: Family of the last compiler translated with
            header dependencies, None when no compiler was involved.
    """

    text: str
    autodeps_family: Family | None = None


def find_closing_paren(tokens: Sequence[Token], start: int) -> int:
    """Index of the ``)`` matching the ``(`` at ``start``, len(tokens) if none."""
    depth = 0
    for i in range(start, len(tokens)):
        if tokens[i].text == "(":
            depth += 1
        elif tokens[i].text == ")":
            depth -= 1
            if depth == 0:
                return i
    return len(tokens)


class CommandTranslator:
    """Translate command lines for the host.

    Args:
        shell: Host shell spelling.
        registry: Toolchains for compiler heads.
    """

    def __init__(self, shell: Shell, registry: ToolchainRegistry) -> None:
        self.shell = shell
        self.registry = registry

    def translate(
        self,
        tokens: Sequence[Token],
        action: Action = Action.TRANSLATE,
        autodeps: bool = False,
    ) -> TranslatedCommand:
        """Translate a full command line.

        Args:
            tokens: The line, after variable expansion.
            action: Translation mode.
            autodeps: Request header dependency flags from compilers.

        Raises:
            ParseError: On anything that cannot be translated in
                TRANSLATE mode, or on a malformed conditional.
        """
        result = TranslatedCommand("")
        if action is Action.RAW:
            result.text = self.shell.raw(tokens)
            return result
        result.text = self._translate_sequence(tokens, action, autodeps, result)
        return result

    def _translate_sequence(
        self,
        tokens: Sequence[Token],
        action: Action,
        autodeps: bool,
        result: TranslatedCommand,
    ) -> str:
        parts: list[str] = []
        i0 = 0
        n = len(tokens)
        while i0 < n:
            i1 = i0 + 1
            while i1 < n and tokens[i1].text not in SEPARATORS:
                if tokens[i1].text == "(":
                    # operators inside a conditional branch stay there
                    i1 = find_closing_paren(tokens, i1)
                i1 += 1
            i1 = min(i1, n)
            parts.append(self._single(tokens[i0:i1], action, autodeps, result))
            while i1 < n and tokens[i1].text in REDIRECTIONS:
                if i1 + 1 >= n:
                    raise ParseError("expected file after", tokens[i1].location)
                parts.append(f" {tokens[i1].text}{tokens[i1 + 1].text}")
                i1 += 2
            if i1 >= n:
                break
            separator = tokens[i1].text
            if separator not in SEPARATORS:
                i0 = i1
                continue
            if separator == ";":
                parts.append(" & " if self.shell.windows else " ; ")
            else:
                parts.append(f" {separator} ")
            i0 = i1 + 1
        return "".join(parts)

    def _single(
        self,
        tokens: Sequence[Token],
        action: Action,
        autodeps: bool,
        result: TranslatedCommand,
    ) -> str:
        head = tokens[0].text
        if head == "if":
            return self._if(tokens, action, autodeps, result)
        if self.shell.has_verb(head):
            return self.shell.verb(tokens)
        if head in COMPILER_HEADS:
            info = self.registry.resolve(head)
            words = translate_compiler(
                info,
                list(tokens),
                action,
                shell=self.shell,
                registry=self.registry,
                autodeps=autodeps,
            )
            if autodeps:
                result.autodeps_family = info.family
            return " ".join(words)
        if action is Action.PERMISSIVE:
            return self.shell.raw(tokens)
        raise ParseError("unknown command", tokens[0].location)

    def _if(
        self,
        tokens: Sequence[Token],
        action: Action,
        autodeps: bool,
        result: TranslatedCommand,
    ) -> str:
        """``if A ==|!= B ( ... ) [else ( ... )]``."""
        n = len(tokens)
        if n == 1:
            raise ParseError("expected first operand after", tokens[0].location)
        if n == 2:
            raise ParseError("expected comparison operator after", tokens[1].location)
        if tokens[2].text not in ("==", "!="):
            raise ParseError(
                "expected valid comparison operator '==' or '!='", tokens[2].location
            )
        if n == 3:
            raise ParseError(
                "expected second operand for comparison after", tokens[2].location
            )
        if n == 4:
            raise ParseError("expected '(' after", tokens[3].location)
        if tokens[4].text != "(":
            raise ParseError("expected '(' here", tokens[4].location)

        lhs, equal, rhs = tokens[1].text, tokens[2].text == "==", tokens[3].text
        windows = self.shell.windows
        if windows:
            ret = ("if " if equal else "if not ") + f'"{lhs}" == "{rhs}" ( '
        else:
            ret = f'if [ "{lhs}" {"=" if equal else "!="} "{rhs}" ]; then '
        end = " )" if windows else " ; fi"

        close = find_closing_paren(tokens, 4)
        if close >= n:
            raise ParseError("cannot find corresponding ')'", tokens[4].location)
        ret += self._translate_sequence(tokens[5:close], action, autodeps, result)
        if close == n - 1:
            return ret + end

        ret += " ) else ( " if windows else " ; else "
        i = close + 1
        if tokens[i].text != "else":
            raise ParseError("expected 'else' keyword here", tokens[i].location)
        i += 1
        if i >= n:
            raise ParseError("expected '(' after", tokens[i - 1].location)
        if tokens[i].text != "(":
            raise ParseError("expected '(' here", tokens[i].location)
        close = find_closing_paren(tokens, i)
        if close >= n:
            raise ParseError("cannot find corresponding ')'", tokens[i].location)
        ret += self._translate_sequence(tokens[i + 1 : close], action, autodeps, result)
        return ret + end
