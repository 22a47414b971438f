# SPDX-License-Identifier: MIT
"""End of parse: final checks and synthetic targets.

Once every description file has been read, the interpreter state is
checked (no open ``begin_translate_if``, no unused variable), then the
conventional targets are added unless the description disabled or
defined them: ``clean``, ``all``, ``install``, ``package``, ``update`` and
the rule regenerating the build file itself. Finally, the dependencies
of force rules are rewritten from output paths to force targets, so that
forcing a target forces everything it is built from.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ninjaconf.core.errors import ParseError, UnusedVariablesError
from ninjaconf.core.rules import RuleBuilder, RuleKind
from ninjaconf.util.strings import did_you_mean

if TYPE_CHECKING:
    from ninjaconf.core.context import InterpreterContext
    from ninjaconf.core.rules import RuleGraph

logger = logging.getLogger(__name__)

AddTarget = Callable[..., None]

# Printed by the self rule when the build tool cannot restart itself after
# the build file was regenerated.
RERUN_BANNER = (
    "@echo x",
    "@echo x x x",
    "@echo x x x x x",
    "@echo x x x x x x . . . RERUN {make_command}",
    "@echo x x x x x",
    "@echo x x x",
    "@echo x",
    "@exit 99",
)


def check_end_of_parse(context: InterpreterContext) -> None:
    """Fail on an open conditional zone or on unused variables.

    Raises:
        ParseError: If a ``begin_translate_if`` was never closed.
        UnusedVariablesError: Listing every variable never expanded.
    """
    if context.translate_zone is not None:
        raise ParseError("unfinished begin_translate_if", context.translate_zone)

    unused = context.variables.unused_names()
    if unused:
        used = context.variables.used_names()
        lines = [
            did_you_mean(f'variable "{name}" defined but not used', name, used)
            for name in unused
        ]
        raise UnusedVariablesError(unused, lines)


def install_commands(
    context: InterpreterContext, prefix: str
) -> tuple[list[str], list[str]]:
    """Commands copying installed files and directories under ``prefix``.

    Returns:
        The commands and the installed files, which become dependencies.
    """
    shell = context.shell
    rules = context.rules
    commands: list[str] = []
    dependencies: list[str] = []
    created: set[str] = set()

    def destination(directory: str) -> str:
        dest = shell.sanitize(f"{prefix}/{directory}" if prefix else directory)
        if dest not in created:
            commands.append(shell.mkdir_p(dest))
            created.add(dest)
        return dest

    for directory, path in rules.file_install_paths:
        dest = destination(directory)
        commands.append(shell.cp(shell.sanitize(path), dest))
        dependencies.append(path)
    for directory, path in rules.dir_install_paths:
        dest = destination(directory)
        commands.append(shell.cp(shell.sanitize(path), dest, recursive=True))
    return commands, dependencies


def add_synthetic_targets(context: InterpreterContext, add_target: AddTarget) -> None:
    """Add the conventional targets the description did not define."""
    rules = context.rules
    shell = context.shell

    def phony(
        name: str,
        commands: list[str],
        dependencies: list[str],
        self_dependency: bool = True,
    ) -> None:
        add_target(
            RuleBuilder(
                kind=RuleKind.PHONY,
                output=name,
                location=None,
                dependencies=dependencies,
                commands=commands,
            ),
            self_dependency=self_dependency,
        )

    if context.generate_clean and "clean" not in rules:
        phony("clean", [shell.rm(output) for output in context.outputs], [])

    if context.generate_all and "all" not in rules:
        phony("all", [], list(context.outputs))

    if context.generate_install and "install" not in rules:
        commands, dependencies = install_commands(context, context.install_prefix)
        phony("install", commands, dependencies)

    if context.generate_package and "package" not in rules:
        name = context.package_name
        commands = [
            shell.rm(name, recursive=True),
            shell.rm(name + shell.archive_suffix),
        ]
        install, dependencies = install_commands(context, name)
        commands += install
        commands.append(shell.zip_dir(name))
        phony("package", commands, dependencies)

    if context.generate_update and "update" not in rules:
        phony("update", [context.cmdline], [], self_dependency=False)

    if context.generate_self and context.output_file not in rules:
        commands = [context.cmdline]
        if not context.backend.self_generation:
            commands += [
                line.format(make_command=context.make_command) for line in RERUN_BANNER
            ]
        add_target(
            RuleBuilder(
                kind=RuleKind.SELF_REGENERATE,
                output=context.output_file,
                location=None,
                dependencies=[context.description_file],
                commands=commands,
            ),
            self_dependency=False,
        )


def resolve_force_rule_deps(rules: RuleGraph, output_file: str) -> None:
    """Point the dependencies of force rules at force targets.

    A dependency produced by another rule is replaced by that rule's force
    target, the build file itself is kept, anything else is dropped.
    """
    for rule in rules:
        if not rule.is_force:
            continue
        resolved = []
        for dependency in rule.dependencies:
            if dependency == output_file:
                resolved.append(dependency)
                continue
            force = rules.find_force(dependency)
            if force is not None:
                resolved.append(force.target)
        rule.dependencies = resolved


def finish_parse(context: InterpreterContext, add_target: AddTarget) -> None:
    """Check the parse, then complete the graph for a backend.

    Leaves the graph empty when the description declares no rule.
    """
    check_end_of_parse(context)
    if not len(context.rules):
        logger.warning("No rule given, nothing to do")
        return
    add_synthetic_targets(context, add_target)
    resolve_force_rule_deps(context.rules, context.output_file)
