# SPDX-License-Identifier: MIT
"""Run state of one configuration.

Everything the interpreter reads or mutates while processing a
description lives in an InterpreterContext, created once per run and
passed explicitly: directories, backend capabilities, generation
switches, the variable store, the toolchain registry and the rule graph.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ninjaconf.configure.platform import Platform, get_platform
from ninjaconf.core.rules import RuleGraph
from ninjaconf.core.variables import VariableStore
from ninjaconf.shell.commands import Shell
from ninjaconf.shell.translator import CommandTranslator
from ninjaconf.toolchains.registry import ToolchainRegistry
from ninjaconf.util.host import HostSystem

if TYPE_CHECKING:
    from ninjaconf.util.source_location import SourceLocation

DESCRIPTION_FILE = "build.ninjaconf"


@dataclass(frozen=True)
class Backend:
    """What a build file format can do.

    Attributes:
        name: Backend name as given to ``-G``.
        default_output: Output file when none is given.
        make_command: Program running the generated file.
        self_generation: Whether the build tool reruns the configuration
            by itself when the build file is out of date.
        header_deps: Whether the build tool reads compiler header
            dependency output.
    """

    name: str
    default_output: str
    make_command: str
    self_generation: bool
    header_deps: bool


BACKENDS: dict[str, Backend] = {
    "ninja": Backend("ninja", "build.ninja", "ninja", True, True),
    "make": Backend("make", "Makefile", "make", False, False),
    "gnumake": Backend("gnumake", "Makefile", "make", False, False),
    "nmake": Backend("nmake", "Makefile", "nmake", False, False),
}


@dataclass
class VariableHelp:
    """A user overridable variable declared with ``ifnot_set``."""

    name: str
    description: str
    location: SourceLocation | None = None


@dataclass
class InterpreterContext:
    """State shared by every statement of a run.

    Attributes:
        source_dir: Directory holding the description.
        build_dir: Directory receiving the build file.
        output_file: Path of the build file, relative to the working
            directory.
        description_file: Path of the description file.
        cmdline: Command line that reruns this configuration.
        backend: Capabilities of the selected backend.
        install_prefix: Root of the ``install`` target.
        package_name: Directory and archive name of the ``package`` target.
        generate_self: Make every rule depend on the build file and
            emit the rule regenerating it.
        outputs: Output paths of the non phony rules, in creation order.
        translating: False inside a ``begin_translate_if`` zone whose
            condition does not hold.
        translate_zone: Location of the open ``begin_translate_if``.
        listing_variables: Only collect ``ifnot_set`` declarations.
        vars_list: Collected ``ifnot_set`` declarations.
        quiet: Per-target log messages are silenced while positive.
    """

    source_dir: str = "."
    build_dir: str = "."
    output_file: str = "build.ninja"
    description_file: str = DESCRIPTION_FILE
    cmdline: str = "ninjaconf"
    backend: Backend = BACKENDS["ninja"]
    install_prefix: str = ""
    package_name: str = "package"
    generate_all: bool = True
    generate_clean: bool = True
    generate_update: bool = True
    generate_install: bool = True
    generate_package: bool = True
    generate_self: bool = True
    platform: Platform = field(default_factory=get_platform)
    host: HostSystem = field(default_factory=HostSystem)
    variables: VariableStore = field(default_factory=VariableStore)
    rules: RuleGraph = field(default_factory=RuleGraph)
    outputs: list[str] = field(default_factory=list)
    translating: bool = True
    translate_zone: SourceLocation | None = None
    listing_variables: bool = False
    vars_list: list[VariableHelp] = field(default_factory=list)
    quiet: int = 0
    shell: Shell = field(init=False)
    registry: ToolchainRegistry = field(init=False)
    translator: CommandTranslator = field(init=False)

    def __post_init__(self) -> None:
        if not self.install_prefix:
            self.install_prefix = self.platform.default_prefix
        self.shell = Shell(self.platform)
        self.registry = ToolchainRegistry(self.host, self.platform, self.build_dir)
        self.translator = CommandTranslator(self.shell, self.registry)

    @property
    def make_command(self) -> str:
        return self.backend.make_command

    @contextmanager
    def silenced(self) -> Iterator[None]:
        """Silence per-target messages for the duration of the block."""
        self.quiet += 1
        try:
            yield
        finally:
            self.quiet -= 1
