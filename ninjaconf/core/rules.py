# SPDX-License-Identifier: MIT
"""Rule data model.

A rule is opened by ``build_file``, ``build_files`` or ``phony`` and
collects command lines until the next rule opens or the file ends. It is
then closed into one or more RuleDescriptors stored in the RuleGraph.

Every single-file rule is stored twice: under its output path (rebuilt
when its inputs change) and as a *force* variant ``f_<output>`` that
always runs.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ninjaconf.core.errors import DuplicateTargetError

if TYPE_CHECKING:
    from ninjaconf.toolchains.toolchain import Family
    from ninjaconf.util.source_location import SourceLocation

FORCE_PREFIX = "f_"


class RuleKind(enum.Enum):
    """Kinds of rules."""

    SINGLE_FILE = "single_file"
    MULTIPLE_FILES = "multiple_files"
    PHONY = "phony"
    SELF_REGENERATE = "self_regenerate"


def force_target_name(output: str) -> str:
    """Target name of the force variant of a rule producing ``output``."""
    return FORCE_PREFIX + output.replace("/", ".")


@dataclass
class RuleBuilder:
    """A rule still collecting its command lines.

    Attributes:
        kind: Rule kind.
        output: Output path, or the variable prefix for MULTIPLE_FILES.
        location: Where the rule was opened.
        dependencies: Declared dependencies.
        commands: Translated command lines, with ``@out``/``@in``/``@item``
            placeholders still in place.
        autodeps: Whether header dependencies are tracked.
        autodeps_file: Depfile path, for GCC-style dependencies.
        autodeps_family: Compiler family whose dependency flags were
            requested by the last translated compiler command.
        items: ``(output, input)`` pairs of a MULTIPLE_FILES rule.
    """

    kind: RuleKind
    output: str
    location: SourceLocation | None
    dependencies: list[str] = field(default_factory=list)
    commands: list[str] = field(default_factory=list)
    autodeps: bool = False
    autodeps_file: str = ""
    autodeps_family: Family | None = None
    items: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class RuleDescriptor:
    """A closed rule, ready for a backend.

    Attributes:
        kind: Rule kind (never MULTIPLE_FILES once closed).
        target: Graph key, the name a user builds.
        output: Path written by the commands.
        dependencies: Paths or targets the rule depends on.
        commands: Final shell commands.
        autodeps: Whether the backend must read header dependencies.
        autodeps_family: Family producing the dependency information.
        autodeps_file: Depfile written by the compiler.
        is_force: Whether this is the always-run variant.
        location: Where the rule was opened.
    """

    kind: RuleKind
    target: str
    output: str
    dependencies: list[str] = field(default_factory=list)
    commands: list[str] = field(default_factory=list)
    autodeps: bool = False
    autodeps_family: Family | None = None
    autodeps_file: str = ""
    is_force: bool = False
    location: SourceLocation | None = None

    @property
    def is_phony(self) -> bool:
        return self.kind is RuleKind.PHONY or not self.commands


class RuleGraph:
    """All closed rules, keyed by target.

    Also indexes force rules by output path and keeps the
    ``(install_dir, source)`` pairs registered by ``install_file`` and
    ``install_dir``.
    """

    def __init__(self) -> None:
        self._rules: dict[str, RuleDescriptor] = {}
        self._force_by_output: dict[str, RuleDescriptor] = {}
        self.file_install_paths: list[tuple[str, str]] = []
        self.dir_install_paths: list[tuple[str, str]] = []

    def add(self, rule: RuleDescriptor) -> None:
        """Insert a closed rule.

        Raises:
            DuplicateTargetError: If the target is already taken.
        """
        existing = self._rules.get(rule.target)
        if existing is not None:
            raise DuplicateTargetError(rule.target, existing.location, rule.location)
        self._rules[rule.target] = rule
        if rule.is_force:
            self._force_by_output[rule.output] = rule

    def find(self, target: str) -> RuleDescriptor | None:
        return self._rules.get(target)

    def find_force(self, output: str) -> RuleDescriptor | None:
        """Return the force rule producing ``output``, if any."""
        return self._force_by_output.get(output)

    def targets(self) -> list[str]:
        """All targets, sorted."""
        return sorted(self._rules)

    def __iter__(self) -> Iterator[RuleDescriptor]:
        for target in self.targets():
            yield self._rules[target]

    def __contains__(self, target: object) -> bool:
        return target in self._rules

    def __len__(self) -> int:
        return len(self._rules)

