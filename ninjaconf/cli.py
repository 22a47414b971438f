# SPDX-License-Identifier: MIT
"""Command-line interface for ninjaconf."""

from __future__ import annotations

import argparse
import logging
import os
import posixpath
import sys

from ninjaconf.core.context import (
    BACKENDS,
    DESCRIPTION_FILE,
    InterpreterContext,
    VariableHelp,
)
from ninjaconf.core.errors import ConfigureError, NinjaconfError
from ninjaconf.core.interpreter import Interpreter
from ninjaconf.generators import get_generator
from ninjaconf.shell.commands import stringify

# Set up logging
logger = logging.getLogger("ninjaconf")

BACKEND_HELP = (
    ("make", "POSIX Makefile"),
    ("gnumake", "GNU Makefile"),
    ("nmake", "Microsoft NMake Makefile"),
    ("ninja", "Ninja build file (this is the default)"),
    ("list-vars", "List project specific variables"),
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_define(text: str) -> tuple[str, str]:
    """Split a ``KEY=VALUE`` define.

    Raises:
        ConfigureError: If there is no ``=`` or no key.
    """
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise ConfigureError(f"cannot parse define directive '{text}'")
    return key, value


def rerun_command(argv: list[str]) -> str:
    """Command line running ninjaconf again with the same arguments."""
    program = sys.argv[0] if sys.argv and sys.argv[0] else "ninjaconf"
    if program.endswith("__main__.py"):
        head = f"{stringify(sys.executable)} -m ninjaconf"
    else:
        head = stringify(program)
    return " ".join([head] + [stringify(arg) for arg in argv])


def format_variables(variables: list[VariableHelp]) -> str:
    """Render the ``ifnot_set`` declarations as a two-column table."""
    if not variables:
        return "Project variables list: (none)\n"
    width = max([len(v.name) for v in variables] + [4]) + 1
    rows = [f"{'name'.ljust(width)}| description"]
    rows += [f"{v.name.ljust(width)}| {v.description}" for v in variables]
    rule = "-" * max(len(row) for row in rows)
    return "Project variables list:\n" + "\n".join([rows[0], rule] + rows[1:]) + "\n"


def build_context(args: argparse.Namespace, argv: list[str]) -> InterpreterContext:
    """Create the run state from parsed arguments.

    Raises:
        ConfigureError: On a bad directory, define or toolchain declaration.
    """
    source_dir = args.source_dir
    if not os.path.isdir(source_dir):
        raise ConfigureError(f"cannot access source dir '{source_dir}'")

    backend = BACKENDS["ninja" if args.generator == "list-vars" else args.generator]
    output = args.output or backend.default_output
    context = InterpreterContext(
        source_dir=source_dir,
        build_dir=posixpath.dirname(output) or ".",
        output_file=output,
        description_file=posixpath.join(source_dir, DESCRIPTION_FILE),
        cmdline=rerun_command(argv),
        backend=backend,
        install_prefix=args.prefix or "",
        generate_self=not args.nodev,
    )

    for define in args.defines:
        key, value = parse_define(define)
        context.variables.add(key, value, used=False, force=False)
    if args.suite:
        context.registry.declare_suite(args.suite)
    for declaration in args.compilers:
        parts = declaration.split(",")
        if len(parts) < 2 or len(parts) > 5 or not all(parts[:2]):
            raise ConfigureError(
                f"cannot parse compiler declaration '{declaration}', expected "
                "COMMAND,COMPILER[,PATH[,VERSION[,ARCH]]]"
            )
        context.registry.declare(*parts)
    return context


def cmd_help_generators() -> int:
    print("Available generators:")
    for name, description in BACKEND_HELP:
        print(f"  {name.ljust(10)}{description}")
    return 0


def cmd_list_vars(args: argparse.Namespace, argv: list[str]) -> int:
    """Print the variables a description lets users override."""
    context = build_context(args, argv)
    variables = Interpreter(context).list_variables(context.description_file)
    sys.stdout.write(format_variables(variables))
    return 0


def cmd_generate(args: argparse.Namespace, argv: list[str]) -> int:
    """Interpret the description and write the build file."""
    context = build_context(args, argv)
    logger.info("Reading %s", context.description_file)
    rules = Interpreter(context).run(context.description_file)
    if not len(rules):
        return 0
    generator = get_generator(
        args.generator, max_command_length=args.max_command_length
    )
    generator.generate(rules, context)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ninjaconf CLI."""
    if argv is None:
        argv = sys.argv[1:]
    from ninjaconf import __version__

    parser = argparse.ArgumentParser(
        prog="ninjaconf",
        description="Generate Ninja or Make build files from build.ninjaconf.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "source_dir",
        nargs="?",
        default=".",
        help="Directory holding build.ninjaconf (default: .)",
    )
    parser.add_argument(
        "-D",
        dest="defines",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Define a variable unless the description sets it",
    )
    parser.add_argument(
        "-G",
        dest="generators",
        action="append",
        default=[],
        metavar="BACKEND",
        help="ninja (default), make, gnumake, nmake, list-vars or help",
    )
    parser.add_argument(
        "-list-vars",
        dest="list_vars",
        action="store_true",
        help="Same as -Glist-vars",
    )
    parser.add_argument(
        "-o",
        dest="outputs",
        action="append",
        default=[],
        metavar="OUTPUT",
        help="Output file (default: build.ninja or Makefile)",
    )
    parser.add_argument(
        "-comp",
        dest="compilers",
        action="append",
        default=[],
        metavar="COMMAND,COMPILER[,PATH[,VERSION[,ARCH]]]",
        help="Declare the compiler used for COMMAND (cc, c++, ...)",
    )
    parser.add_argument(
        "-suite",
        metavar="NAME",
        help="Use a compiler suite (gcc, clang, armclang, msvc, icc) for cc and c++",
    )
    parser.add_argument("-prefix", metavar="PATH", help="Installation prefix")
    parser.add_argument(
        "-nodev",
        action="store_true",
        help="Do not regenerate the build file when the description changes",
    )
    parser.add_argument(
        "--max-command-length",
        type=int,
        metavar="N",
        help="Longest inline command in a Ninja file",
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.debug)

    if len(args.generators) > 1:
        parser.error("generator already given")
    if len(args.outputs) > 1:
        parser.error("output already given")
    generator = args.generators[0] if args.generators else "ninja"
    if args.list_vars:
        generator = "list-vars"
    if generator == "help":
        return cmd_help_generators()
    if generator not in BACKENDS and generator != "list-vars":
        parser.error(f"unknown generator '{generator}'")
    args.generator = generator
    args.output = args.outputs[0] if args.outputs else None

    try:
        if generator == "list-vars":
            return cmd_list_vars(args, argv)
        return cmd_generate(args, argv)
    except NinjaconfError as e:
        print(f"ninjaconf: error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
