# SPDX-License-Identifier: MIT
"""Shared machinery for compiler flag translation.

Command lines name compilers abstractly (``cc``, ``c++``) and use a
GCC-like vocabulary of flags. A flag translator turns such a command
into the concrete invocation of a resolved toolchain using a table from
abstract flag to concrete flags. An empty table entry means the flag has
no equivalent and is dropped.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ParseError
from ninjaconf.core.tokenizer import Action

if TYPE_CHECKING:
    from ninjaconf.core.tokenizer import Token
    from ninjaconf.shell.commands import Shell
    from ninjaconf.toolchains.toolchain import ToolchainInfo

logger = logging.getLogger(__name__)

# Replaced by header dependency flags when the rule is closed.
AUTODEPS_PLACEHOLDER = "@@autodeps_flags"

# CUDA compute capabilities understood by -msm_XX.
CUDA_ARCHS = ("35", "50", "53", "60", "61", "62", "70", "72", "75")

SVE_WIDTHS = ("128", "256", "512", "1024", "2048")

STD_FLAGS = (
    "-std=c89",
    "-std=c99",
    "-std=c11",
    "-std=c++98",
    "-std=c++03",
    "-std=c++11",
    "-std=c++14",
    "-std=c++17",
    "-std=c++20",
)


def uniq(items: Iterable[str]) -> list[str]:
    """Drop repeated items, keeping the first occurrence."""
    return list(dict.fromkeys(items))


def lib_basename(name: str, windows: bool = False) -> str:
    """Strip the ``lib`` prefix and library extension from a file name.

    >>> lib_basename("libfoo.so")
    'foo'
    """
    probe = name.lower() if windows else name
    start = 3 if probe.startswith("lib") else 0
    end = len(name)
    for ext in (".so", ".a", ".lib", ".dll"):
        if probe.endswith(ext):
            end -= len(ext)
            break
    return name[start:end]


def cuda_arch_flags(template: str) -> dict[str, str]:
    """Table entries for -msm_XX, ``template`` receives the arch number."""
    return {f"-msm_{sm}": template.format(sm) if template else "" for sm in CUDA_ARCHS}


def sve_flags(enabled: bool) -> dict[str, str]:
    flags = {"-msve": "-march=armv8.2-a+sve" if enabled else ""}
    for width in SVE_WIDTHS:
        flags[f"-msve{width}"] = (
            f"-march=armv8.2-a+sve -msve-vector-bits={width}" if enabled else ""
        )
    return flags


class BaseFlagTranslator(ABC):
    """Translate an abstract compiler command for one toolchain.

    Subclasses provide the flag table and may intercept arguments that
    need more than a table lookup.
    """

    def __init__(
        self, info: ToolchainInfo, shell: Shell, action: Action
    ) -> None:
        self.info = info
        self.shell = shell
        self.action = action

    @property
    def executable(self) -> str:
        return self.info.path

    @abstractmethod
    def flag_table(self) -> dict[str, str]:
        """Map abstract flags to concrete ones."""

    def translate(self, tokens: Sequence[Token]) -> list[str]:
        """Translate ``tokens`` (head included) into command words."""
        table = self.flag_table()
        ret = [self.executable]
        for token in tokens[1:]:
            if token.text == "--version":
                return self.version_command()
            if self.intercept(token, ret):
                continue
            ret.extend(self.translate_arg(token, table))
        self.finish(ret)
        return uniq(ret)

    def version_command(self) -> list[str]:
        return [self.executable, "--version"]

    def intercept(self, token: Token, ret: list[str]) -> bool:
        """Handle ``token`` specially, returning True when consumed."""
        return False

    def finish(self, ret: list[str]) -> None:
        """Append trailing words once every argument is translated."""

    def rpath(self, directory: str) -> str:
        if not self.info.family.has_rpath:
            return ""
        return self.shell.platform.rpath_argument(directory)

    def translate_arg(self, token: Token, table: dict[str, str]) -> list[str]:
        """Translate one argument through ``table``.

        ``-I``, ``-L``, ``-l``, ``-l:`` and ``-D`` carry a value and are
        translated with path sanitization; other dash arguments go
        through the table.
        """
        arg = token.text
        ify = self.shell.ify
        if arg in ("-lpthread", "-lm"):
            return [arg]
        if arg == "-L.":
            return self._with_rpath("-L.", ".")
        if not arg.startswith("-"):
            return [ify(arg)]

        if arg.startswith("-l:"):
            if len(arg) == 3:
                raise ParseError("no file/directory given here", token.location)
            return ["-l:" + ify(arg[3:])]
        option = arg[1:2]
        if option in ("I", "L", "l"):
            if len(arg) == 2:
                raise ParseError("no file/directory given here", token.location)
            value = arg[2:]
            if option == "l":
                return ["-l" + ify(lib_basename(value, self.shell.windows))]
            if option == "L":
                path = ify(value)
                return self._with_rpath("-L" + path, path)
            return ["-I" + ify(value)]
        if option == "D":
            if len(arg) == 2:
                raise ParseError("no macro name given here", token.location)
            return [arg]

        if arg in table:
            if table[arg]:
                return [table[arg]]
            logger.debug(
                "Option %s is not supported or known by %s, ignoring it",
                arg,
                self.executable,
            )
            return []
        if self.action is Action.PERMISSIVE:
            return [arg]
        raise ParseError("unknown compiler option", token.location)

    def _with_rpath(self, flag: str, directory: str) -> list[str]:
        rpath = self.rpath(directory)
        if rpath:
            return [flag, f"'-Wl,{rpath}'"]
        return [flag]
