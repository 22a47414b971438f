# SPDX-License-Identifier: MIT
"""Makefile generator.

Writes the rule graph for POSIX make, GNU make or NMake. Make runs every
command line in its own shell, so long rules never need a script. Make
backends cannot restart after regenerating their own Makefile: the self
rule prints a banner asking to rerun and fails.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from ninjaconf.core.errors import GenerateError
from ninjaconf.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from ninjaconf.core.context import InterpreterContext
    from ninjaconf.core.rules import RuleDescriptor, RuleGraph

logger = logging.getLogger(__name__)

FLAVORS = ("posix", "gnu", "nmake")


def escape(text: str) -> str:
    """Escape ``$`` for make."""
    return text.replace("$", "$$")


def escape_path(path: str) -> str:
    """Escape a target or prerequisite.

    Raises:
        GenerateError: If the path holds a blank, which make cannot express
            portably.
    """
    if " " in path or "\t" in path:
        raise GenerateError(f"make cannot handle blanks in path '{path}'")
    return escape(path)


class MakeGenerator(BaseGenerator):
    """Generator for Makefiles.

    Example:
        generator = MakeGenerator("gnu")
        generator.generate(rules, context)
        # Writes context.output_file
    """

    def __init__(self, flavor: str = "posix") -> None:
        """Initialize the Makefile generator.

        Args:
            flavor: "posix", "gnu" or "nmake".
        """
        if flavor not in FLAVORS:
            raise ValueError(f"unknown make flavor '{flavor}'")
        super().__init__("nmake" if flavor == "nmake" else "make")
        self.flavor = flavor

    def generate(self, rules: RuleGraph, context: InterpreterContext) -> None:
        """Write ``context.output_file``.

        Raises:
            GenerateError: If a path cannot be written in make syntax or
                the file cannot be written.
        """
        ordered = self.ordered(rules)
        f = io.StringIO()
        f.write(self.header(context))
        if self.flavor == "posix":
            f.write(".POSIX:\n")
        f.write(".SUFFIXES:\n\n")
        if self.flavor == "gnu":
            phony = [escape_path(r.target) for r in ordered if r.is_phony]
            if phony:
                f.write(".PHONY: " + " ".join(phony) + "\n\n")

        for rule in ordered:
            self._write_rule(f, rule, context)

        try:
            context.host.write_text(context.output_file, f.getvalue())
        except OSError as e:
            raise GenerateError(f"cannot write '{context.output_file}': {e}") from e
        logger.info("Makefile written to %s", context.output_file)

    def _write_rule(
        self, f: io.StringIO, rule: RuleDescriptor, context: InterpreterContext
    ) -> None:
        f.write("# ---\n\n")
        prerequisites = "".join(" " + escape_path(d) for d in rule.dependencies)
        f.write(f"{escape_path(rule.target)}:{prerequisites}\n")
        if rule.commands:
            commands = list(rule.commands)
            mkdir = self.output_dir_command(rule, context)
            if mkdir is not None:
                commands.insert(0, mkdir)
            for command in commands:
                f.write(f"\t{escape(command)}\n")
        f.write("\n")
