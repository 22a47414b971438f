# SPDX-License-Identifier: MIT
"""Ninja build file generator.

Every rule with commands becomes a ``rule NAME_rule`` plus the ``build``
statement using it; rules without commands become ``phony`` builds.
Commands too long for the host shell are written to a script under
``_ninja_build_scripts`` and the rule runs the script instead.
"""

from __future__ import annotations

import io
import logging
import posixpath
import sys
from typing import TYPE_CHECKING

import ninja_syntax

from ninjaconf.core.errors import GenerateError
from ninjaconf.core.rules import RuleKind
from ninjaconf.generators.generator import BaseGenerator, rule_name
from ninjaconf.toolchains.registry import COMPILER_INFOS_DIR
from ninjaconf.toolchains.toolchain import Family

if TYPE_CHECKING:
    from ninjaconf.core.context import InterpreterContext
    from ninjaconf.core.rules import RuleDescriptor, RuleGraph

logger = logging.getLogger(__name__)

BUILD_SCRIPTS_DIR = "_ninja_build_scripts"

# Name of the header included by the /showIncludes probe; unlikely to
# appear anywhere else in the compiler output.
_PROBE_HEADER = "4294967291.hpp"
_PROBE_SOURCE = "msvc_deps_prefix.cpp"


def msvc_deps_prefix(context: InterpreterContext, msvc_path: str) -> str:
    """Return the localized prefix cl.exe puts before included files.

    Compiles a file including a known header with ``/showIncludes`` and
    keeps the text of the matching line up to its second colon.

    Raises:
        GenerateError: If the prefix cannot be determined.
    """
    host = context.host
    directory = posixpath.join(context.build_dir, COMPILER_INFOS_DIR)
    host.write_text(posixpath.join(directory, _PROBE_HEADER), "#define FOO\n")
    host.write_text(
        posixpath.join(directory, _PROBE_SOURCE),
        f'#include "{_PROBE_HEADER}"\nint main() {{return 0;}}',
    )
    try:
        output, code = host.run_process(
            f'cd "{directory}" & {msvc_path} /nologo /showIncludes {_PROBE_SOURCE}'
        )
    except OSError as e:
        raise GenerateError(f"cannot run '{msvc_path}': {e}") from e
    if code == 0:
        for line in output.splitlines():
            if _PROBE_HEADER not in line:
                continue
            first = line.find(":")
            second = line.find(":", first + 1) if first >= 0 else -1
            if second >= 0:
                return line[: second + 1]
            break
    raise GenerateError("cannot get MSVC prefix when /showIncludes")


class NinjaGenerator(BaseGenerator):
    """Generator for Ninja build files.

    Example:
        generator = NinjaGenerator()
        generator.generate(rules, context)
        # Writes context.output_file
    """

    def __init__(self, *, max_command_length: int | None = None) -> None:
        """Initialize the Ninja generator.

        Args:
            max_command_length: Longest inline command, overriding the host
                shell limit.
        """
        super().__init__("ninja")
        self._max_command_length = max_command_length

    def generate(self, rules: RuleGraph, context: InterpreterContext) -> None:
        """Write ``context.output_file``.

        Raises:
            GenerateError: If a script or the MSVC probe cannot be written
                or run.
        """
        buf = io.StringIO()
        buf.write(self.header(context))
        writer = ninja_syntax.Writer(buf, width=sys.maxsize)

        msvc_path = self._msvc_path(rules, context)
        if msvc_path:
            writer.variable("msvc_deps_prefix", msvc_deps_prefix(context, msvc_path))
            writer.newline()

        taken: set[str] = set()
        for rule in self.ordered(rules):
            self._write_rule(writer, rule, context, taken)
            if rule.target == "all":
                writer.default("all")
                writer.newline()

        try:
            context.host.write_text(context.output_file, buf.getvalue())
        except OSError as e:
            raise GenerateError(f"cannot write '{context.output_file}': {e}") from e
        logger.info("Ninja build file written to %s", context.output_file)

    def _msvc_path(self, rules: RuleGraph, context: InterpreterContext) -> str:
        """Path of cl.exe when a rule reads its header dependencies."""
        if not any(r.autodeps and r.autodeps_family is Family.MSVC for r in rules):
            return ""
        for info in context.registry:
            if info.family is Family.MSVC:
                return info.path
        return ""

    def _limit(self, context: InterpreterContext) -> int:
        if self._max_command_length is not None:
            return self._max_command_length
        return context.platform.max_command_length

    def _write_rule(
        self,
        writer: ninja_syntax.Writer,
        rule: RuleDescriptor,
        context: InterpreterContext,
        taken: set[str],
    ) -> None:
        writer.comment("---")
        writer.newline()
        if not rule.commands:
            writer.build(rule.target, "phony", rule.dependencies)
            writer.newline()
            return

        commands = list(rule.commands)
        mkdir = self.output_dir_command(rule, context)
        if mkdir is not None:
            commands.insert(0, mkdir)

        name = self._unique_name(rule.target, taken)
        windows = context.platform.is_windows
        if context.platform.command_length(rule.commands) >= self._limit(context):
            command = self._write_script(name, commands, context)
        elif windows and len(commands) > 1:
            command = "cmd /c ( " + " ) && ( ".join(commands) + " )"
        else:
            command = " && ".join(commands)

        depfile = None
        deps = None
        if rule.autodeps and rule.autodeps_family is not None:
            deps = rule.autodeps_family.deps_style
            if deps == "gcc":
                depfile = rule.autodeps_file

        writer.rule(
            name,
            ninja_syntax.escape(command),
            depfile=depfile,
            generator=rule.kind is RuleKind.SELF_REGENERATE,
            deps=deps,
        )
        writer.newline()
        writer.build(rule.target, name, rule.dependencies)
        writer.newline()

    @staticmethod
    def _unique_name(target: str, taken: set[str]) -> str:
        """Rule name for ``target``, suffixed when another target maps to it."""
        base = rule_name(target) + "_rule"
        name = base
        n = 2
        while name in taken:
            name = f"{base}_{n}"
            n += 1
        taken.add(name)
        return name

    def _write_script(
        self, name: str, commands: list[str], context: InterpreterContext
    ) -> str:
        """Write ``commands`` to a script, returning the command running it."""
        shell = context.shell
        if context.platform.is_windows:
            path = f"{BUILD_SCRIPTS_DIR}/{name}.bat"
            text = "@echo on\n\n" + "".join(
                f"{c}\nif %errorlevel% neq 0 exit /B %errorlevel%\n\n" for c in commands
            )
            command = "cmd /C " + shell.sanitize(path)
        else:
            path = f"{BUILD_SCRIPTS_DIR}/{name}.sh"
            text = "#!/bin/sh\n\nset -e\nset -x\n\n" + "".join(
                f"{c}\n\n" for c in commands
            )
            command = "sh " + path
        try:
            context.host.write_text(posixpath.join(context.build_dir, path), text)
        except OSError as e:
            raise GenerateError(f"cannot write script '{path}': {e}") from e
        logger.debug("Commands of '%s' written to %s", name, path)
        return command
