# SPDX-License-Identifier: MIT
"""Generator protocol for build file generation.

Generators take a finished RuleGraph and write the build file of a build
tool (Ninja, POSIX make, GNU make, NMake).
"""

from __future__ import annotations

import posixpath
import re
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ninjaconf.core.rules import RuleKind

if TYPE_CHECKING:
    from ninjaconf.core.context import InterpreterContext
    from ninjaconf.core.rules import RuleDescriptor, RuleGraph

# Targets written before and after all the others.
FIRST_TARGETS = ("all",)
LAST_TARGETS = ("install", "clean")

_NOT_RULE_NAME_RE = re.compile(r"[^A-Za-z0-9_.-]")


@runtime_checkable
class Generator(Protocol):
    """Protocol for build file generators.

    A Generator takes a rule graph and writes the build file named by
    the context. Different generators produce different formats.
    """

    @property
    def name(self) -> str:
        """Generator name (e.g., 'ninja', 'make')."""
        ...

    def generate(self, rules: RuleGraph, context: InterpreterContext) -> None:
        """Write the build file for a rule graph.

        Args:
            rules: The finished rule graph.
            context: Run state holding the output path and host.
        """
        ...


class BaseGenerator:
    """Base class for generators with common functionality."""

    def __init__(self, name: str) -> None:
        """Initialize a generator.

        Args:
            name: Generator name.
        """
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def generate(self, rules: RuleGraph, context: InterpreterContext) -> None:
        """Generate build files. Subclasses must implement."""
        raise NotImplementedError

    def header(self, context: InterpreterContext) -> str:
        """Comment block opening every generated file.

        Holds no timestamp so that regenerating with unchanged inputs
        gives the same bytes.
        """
        return (
            "#\n"
            "# File generated by ninjaconf\n"
            f"# Command line: {context.cmdline}\n"
            "#\n\n"
        )

    def ordered(self, rules: RuleGraph) -> list[RuleDescriptor]:
        """Rules in writing order.

        ``all`` comes first, then every other rule sorted by target, then
        ``install`` and ``clean``.
        """
        special = FIRST_TARGETS + LAST_TARGETS
        first = [r for t in FIRST_TARGETS if (r := rules.find(t)) is not None]
        last = [r for t in LAST_TARGETS if (r := rules.find(t)) is not None]
        return first + [r for r in rules if r.target not in special] + last

    def output_dir_command(
        self, rule: RuleDescriptor, context: InterpreterContext
    ) -> str | None:
        """Command creating the directory of a rule's output, if it has one."""
        if rule.kind is RuleKind.PHONY:
            return None
        directory = posixpath.dirname(rule.output.replace("\\", "/"))
        if not directory:
            return None
        return context.shell.mkdir_p(context.shell.sanitize(directory))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


def rule_name(target: str) -> str:
    """Name of the build tool rule running the commands of ``target``."""
    return _NOT_RULE_NAME_RE.sub("_", target.replace("/", ".").replace("\\", "."))


def get_generator(
    backend: str, *, max_command_length: int | None = None
) -> BaseGenerator:
    """Return the generator writing files for ``backend``.

    Raises:
        ValueError: If ``backend`` is not known.
    """
    from ninjaconf.generators.make import MakeGenerator
    from ninjaconf.generators.ninja import NinjaGenerator

    if backend == "ninja":
        return NinjaGenerator(max_command_length=max_command_length)
    flavors = {"make": "posix", "gnumake": "gnu", "nmake": "nmake"}
    if backend in flavors:
        return MakeGenerator(flavors[backend])
    raise ValueError(f"unknown backend '{backend}'")
