# SPDX-License-Identifier: MIT
"""Build description interpreter.

The interpreter reads a description line by line. Statement lines define
variables, probe the host, register install paths or open rules; lines
starting with a tab are command lines, translated for the host and
appended to the open rule. A rule stays open until the next rule opens
or the file ends, and is then closed into RuleDescriptors stored in the
context's RuleGraph.

Example:
    context = InterpreterContext(output_file="build.ninja")
    graph = Interpreter(context).run("build.ninjaconf")
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ninjaconf.configure.finders import Finder, LibType
from ninjaconf.core.context import InterpreterContext, VariableHelp
from ninjaconf.core.errors import IncludeCycleError, ParseError
from ninjaconf.core.rules import (
    RuleBuilder,
    RuleDescriptor,
    RuleGraph,
    RuleKind,
    force_target_name,
)
from ninjaconf.core.statements import CONSTANTS, KEYWORDS, Statement, classify
from ninjaconf.core.subst import substitute
from ninjaconf.core.synthesis import finish_parse
from ninjaconf.core.tokenizer import (
    Action,
    LinePrefix,
    Token,
    parse_line_prefix,
    tokenize,
)
from ninjaconf.shell.commands import stringify
from ninjaconf.toolchains.common import AUTODEPS_PLACEHOLDER
from ninjaconf.toolchains.compilers import autodeps_flags
from ninjaconf.util.source_location import Phase, SourceLocation
from ninjaconf.util.strings import did_you_mean

logger = logging.getLogger(__name__)

# Extension constants and the FileExtensions field they read.
_EXTENSION_CONSTANTS = {
    "@obj_ext": "obj",
    "@asm_ext": "asm",
    "@static_lib_ext": "static_lib",
    "@shared_lib_ext": "shared_lib",
    "@shared_link_ext": "shared_link",
    "@exe_ext": "exe",
}

# Placeholders a `set` may store for later use in command lines.
_PLACEHOLDERS = ("@in", "@item", "@out")

Handler = Callable[[list[Token]], None]


@dataclass
class LogicalLine:
    """A statement or command line, continuation lines joined.

    Attributes:
        tokens: Tokens of every physical line, the prefix removed.
        prefix: The decoded ``[X:A]`` prefix.
        is_command: Whether the first physical line starts with a tab.
        location: Location of the first physical line.
    """

    tokens: list[Token]
    prefix: LinePrefix
    is_command: bool
    location: SourceLocation


def format_output(fmt: str, path: str) -> str:
    """Fill ``%b`` (basename), ``%r`` (rootname) and ``%e`` (extension).

    The extension is given without its dot.

    >>> format_output("obj/%r.o", "src/main.c")
    'obj/main.o'
    """
    basename = posixpath.basename(path)
    root, ext = posixpath.splitext(basename)
    out: list[str] = []
    i = 0
    while i < len(fmt):
        c = fmt[i]
        if c == "%" and i + 1 < len(fmt) and fmt[i + 1] in "bre":
            out.append({"b": basename, "r": root, "e": ext[1:]}[fmt[i + 1]])
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


class Interpreter:
    """Interpret build descriptions into a RuleGraph.

    Args:
        context: Run state; its variable store and rule graph are filled
            in place.
    """

    def __init__(self, context: InterpreterContext) -> None:
        self.context = context
        self.finder = Finder(
            context.host, context.platform, context.shell, context.variables
        )
        self._open: RuleBuilder | None = None
        self._include_stack: list[str] = []
        self._handlers: dict[Statement, Handler] = {
            Statement.DISABLE_ALL: self._disable,
            Statement.DISABLE_UPDATE: self._disable,
            Statement.DISABLE_CLEAN: self._disable,
            Statement.DISABLE_INSTALL: self._disable,
            Statement.DISABLE_PACKAGE: self._disable,
            Statement.GLOB: self._glob,
            Statement.IFNOT_GLOB: self._glob,
            Statement.POPEN: self._popen,
            Statement.GETENV: self._getenv,
            Statement.BUILD_FILE: self._build_file,
            Statement.PHONY: self._build_file,
            Statement.BUILD_FILES: self._build_files,
            Statement.FIND_EXE: self._find_exe,
            Statement.FIND_HEADER: self._find_header,
            Statement.FIND_LIB: self._find_lib,
            Statement.ECHO: self._echo,
            Statement.INCLUDE: self._include,
            Statement.INSTALL_DIR: self._install,
            Statement.INSTALL_FILE: self._install,
            Statement.PACKAGE_NAME: self._package_name,
            Statement.BEGIN_TRANSLATE_IF: self._begin_translate_if,
        }

    # Entry points

    def run(self, path: str) -> RuleGraph:
        """Parse ``path`` and every file it includes, then finish the graph.

        Returns:
            The rule graph, empty when the description declares no rule.

        Raises:
            NinjaconfError: On any fatal diagnostic.
        """
        self.parse_file(path)
        finish_parse(self.context, self.add_target)
        return self.context.rules

    def list_variables(self, path: str) -> list[VariableHelp]:
        """Collect the ``ifnot_set`` declarations of ``path``.

        Only ``set`` and ``ifnot_set`` are evaluated; unknown variables are
        expanded to their own name.
        """
        self.context.listing_variables = True
        self.parse_file(path)
        return self.context.vars_list

    def parse_file(self, path: str, location: SourceLocation | None = None) -> None:
        """Interpret one description file.

        The rule open in the including file, if any, is set aside while
        ``path`` is interpreted and reopened afterwards.

        Raises:
            IncludeCycleError: If ``path`` is already being interpreted.
            ParseError: If the file cannot be read or is malformed.
        """
        key = self.context.host.realpath(path)
        if key in self._include_stack:
            chain = self._include_stack[self._include_stack.index(key) :] + [key]
            raise IncludeCycleError(chain, location)
        try:
            text = self.context.host.read_text(path)
        except OSError as e:
            raise ParseError(f"cannot read '{path}': {e}", location) from e

        logger.debug("Parsing '%s'", path)
        outer_rule, self._open = self._open, None
        self._include_stack.append(key)
        try:
            for line in self._logical_lines(path, text.splitlines()):
                self._dispatch(line)
            self._close_rule()
        finally:
            self._include_stack.pop()
            self._open = outer_rule

    # Line reading

    def _logical_lines(self, path: str, lines: list[str]) -> Iterator[LogicalLine]:
        i = 0
        while i < len(lines):
            raw = lines[i]
            i += 1
            stripped = raw.strip()
            if not stripped or stripped.startswith("#"):
                continue
            location = SourceLocation(path, i, source=stripped)
            prefix = parse_line_prefix(
                [Token(stripped.split(None, 1)[0], location.at(0))]
            )
            # Lines of another OS are only tokenized to find their extent.
            expand = prefix.matches(self.context.platform.os_letter)

            tokens = self._line_tokens(path, stripped, i, expand)
            continued = bool(tokens) and tokens[-1].text == "\\"
            while continued and i < len(lines):
                if tokens and tokens[-1].text == "\\":
                    tokens.pop()
                following = lines[i].strip()
                i += 1
                if not following:
                    break
                if following.startswith("#"):
                    continue
                tokens.extend(self._line_tokens(path, following, i, expand))
                continued = bool(tokens) and tokens[-1].text == "\\"
            if tokens and tokens[-1].text == "\\":
                tokens.pop()

            if not expand:
                continue
            if prefix.present:
                tokens = tokens[1:]
            if not tokens:
                if prefix.present:
                    raise ParseError("expected statement after", location)
                continue
            yield LogicalLine(tokens, prefix, raw.startswith("\t"), location)

    def _line_tokens(
        self, path: str, text: str, lineno: int, expand: bool
    ) -> list[Token]:
        context = self.context
        loc = SourceLocation(path, lineno, source=text)
        phase = Phase.BEFORE
        if expand and context.translating:
            text = substitute(
                text,
                loc,
                context.variables,
                echo_unknown=context.listing_variables,
            )
            phase = Phase.AFTER
        return tokenize(text, loc.with_source(text, phase))

    def _dispatch(self, line: LogicalLine) -> None:
        context = self.context
        tokens = line.tokens
        statement = None if line.is_command else classify(tokens[0].text)

        if statement is Statement.END_TRANSLATE and not context.listing_variables:
            self._end_translate(tokens)
            return
        if not context.translating:
            return
        if statement in (Statement.SET, Statement.IFNOT_SET):
            self._set(tokens)
            return
        if context.listing_variables:
            return

        if line.is_command:
            self._command(tokens, line.prefix.action)
        elif statement is None:
            head = tokens[0]
            raise ParseError(
                did_you_mean(f'unknown statement "{head.text}"', head.text, KEYWORDS),
                head.location,
            )
        else:
            self._handlers[statement](tokens)

    # Variables

    def _set(self, tokens: list[Token]) -> None:
        """``set NAME = VALUE...`` and ``ifnot_set "DESC" NAME = VALUE...``."""
        is_set = tokens[0].text == Statement.SET.value
        if not is_set and len(tokens) == 1:
            raise ParseError("expected variable description after", tokens[0].location)
        i = 1 if is_set else 2
        if len(tokens) == i:
            raise ParseError("expected variable name after", tokens[i - 1].location)
        i += 1
        if len(tokens) == i:
            raise ParseError("expected '=' after", tokens[i - 1].location)
        if tokens[i].text != "=":
            raise ParseError("expected '=' here", tokens[i].location)

        name = tokens[i - 1].text
        value = " ".join(t.text for t in tokens[i + 1 :])
        if value.startswith("@") and not self.context.listing_variables:
            value = self._constant(value, tokens[i + 1])
        self.context.variables.add(
            name, value, used=False, force=is_set, location=tokens[0].location
        )
        if not is_set:
            self.context.vars_list.append(
                VariableHelp(name, tokens[1].text, tokens[0].location)
            )

    def _constant(self, value: str, token: Token) -> str:
        context = self.context
        if value == "@source_dir":
            return _forward_slashes(context.source_dir, context.platform.is_windows)
        if value == "@build_dir":
            return _forward_slashes(context.build_dir, context.platform.is_windows)
        if value == "@make_command":
            return context.make_command
        if value == "@prefix":
            return context.install_prefix
        if value in _EXTENSION_CONSTANTS:
            family = context.registry.resolve("cc").family
            extensions = context.platform.extensions(family)
            return getattr(extensions, _EXTENSION_CONSTANTS[value])
        if value in ("@ccomp_suite", "@cppcomp_suite"):
            name = "cc" if value == "@ccomp_suite" else "c++"
            return context.registry.resolve(name).suite_name
        if value in ("@ccomp_path", "@cppcomp_path"):
            name = "cc" if value == "@ccomp_path" else "c++"
            return context.registry.resolve(name).path
        if value in _PLACEHOLDERS:
            return value
        raise ParseError(
            did_you_mean(f'unknown constant "{value}"', value, CONSTANTS),
            token.location,
        )

    def _glob(self, tokens: list[Token]) -> None:
        """``glob NAME = PATTERN...``; ``ifnot_glob`` keeps an existing value."""
        self._expect_assignment(tokens, "globbing expression")
        files = [
            stringify(match)
            for pattern in tokens[3:]
            for match in self.context.host.glob(pattern.text)
        ]
        self.context.variables.add(
            tokens[1].text,
            " ".join(files),
            force=tokens[0].text == Statement.GLOB.value,
            location=tokens[0].location,
        )

    def _popen(self, tokens: list[Token]) -> None:
        """``popen NAME = COMMAND...``: the command output, one word per line."""
        self._expect_assignment(tokens, "command")
        output = self._run(tokens[3:])
        words = [line.strip() for line in output.splitlines() if line.strip()]
        self.context.variables.add(
            tokens[1].text, " ".join(words), location=tokens[0].location
        )

    def _getenv(self, tokens: list[Token]) -> None:
        """``getenv NAME = ENV``, empty when ENV is not set."""
        self._expect_assignment(tokens, "environment variable name")
        if len(tokens) > 4:
            raise ParseError("extra token here", tokens[4].location)
        value = self.context.host.getenv(tokens[3].text) or ""
        value = _forward_slashes(value, self.context.platform.is_windows)
        self.context.variables.add(tokens[1].text, value, location=tokens[0].location)

    def _expect_assignment(self, tokens: list[Token], what: str) -> None:
        if len(tokens) == 1:
            raise ParseError("expected variable name after", tokens[0].location)
        if len(tokens) == 2:
            raise ParseError("expected '=' after", tokens[1].location)
        if tokens[2].text != "=":
            raise ParseError("expected '=' here", tokens[2].location)
        if len(tokens) == 3:
            raise ParseError(f"expected {what} after", tokens[2].location)

    def _run(self, tokens: list[Token]) -> str:
        output, code = self.context.host.run_process(" ".join(t.text for t in tokens))
        if code != 0:
            raise ParseError(f"process failed with code {code}", tokens[0].location)
        return output

    # Host probing

    def _find_exe(self, tokens: list[Token]) -> None:
        """``find_exe [optional] NAME = PROGRAM PATHS...``."""
        i, required = self._optional(tokens)
        var, program, paths = self._find_args(tokens, i, ["program name"])
        self.finder.find_exe(
            var, program[0], paths, required=required, location=tokens[0].location
        )

    def _find_header(self, tokens: list[Token]) -> None:
        """``find_header [optional] NAME = HEADER PATHS...``."""
        i, required = self._optional(tokens)
        var, header, paths = self._find_args(tokens, i, ["header name"])
        self.finder.find_header(
            var, header[0], paths, required=required, location=tokens[0].location
        )

    def _find_lib(self, tokens: list[Token]) -> None:
        """``find_lib [MODIFIERS] NAME = HEADER LIB PATHS...``.

        Modifiers are ``optional`` and one of ``dynamic``, ``static`` or
        ``import``.
        """
        required = True
        import_lib = False
        libtype = LibType.AUTOMATIC
        i = 1
        while i < min(len(tokens), 3):
            word = tokens[i].text
            if word == "optional":
                required = False
            elif word == "import":
                import_lib = True
            elif word == "dynamic":
                libtype = LibType.DYNAMIC
            elif word == "static":
                libtype = LibType.STATIC
            else:
                break
            i += 1
        var, (header, binary), paths = self._find_args(
            tokens, i, ["header name", "library name"]
        )
        rule = self.finder.find_lib(
            var,
            header,
            binary,
            paths,
            libtype=libtype,
            required=required,
            import_lib=import_lib,
            location=tokens[0].location,
        )
        if rule is not None:
            self.add_target(rule)

    def _optional(self, tokens: list[Token]) -> tuple[int, bool]:
        if len(tokens) > 1 and tokens[1].text == "optional":
            return 2, False
        return 1, True

    def _find_args(
        self, tokens: list[Token], i: int, names: list[str]
    ) -> tuple[str, list[str], list[str]]:
        """Split ``NAME = ARG... PATHS...`` starting at ``tokens[i]``."""
        if len(tokens) <= i:
            raise ParseError("expected variable name after", tokens[i - 1].location)
        if len(tokens) == i + 1:
            raise ParseError("expected '=' after", tokens[i].location)
        if tokens[i + 1].text != "=":
            raise ParseError("expected '=' here", tokens[i + 1].location)
        j = i + 2
        args = []
        for name in names:
            if len(tokens) <= j:
                raise ParseError(f"expected {name} after", tokens[j - 1].location)
            args.append(tokens[j].text)
            j += 1
        return tokens[i].text, args, [t.text for t in tokens[j:]]

    # Rules

    def _open_rule(self, rule: RuleBuilder) -> None:
        self._close_rule()
        self._open = rule

    def _close_rule(self) -> None:
        if self._open is not None:
            rule, self._open = self._open, None
            self.add_target(rule)

    def _build_file(self, tokens: list[Token]) -> None:
        """``build_file OUTPUT [deps|autodeps DEPS...]`` or ``phony NAME ...``."""
        phony = tokens[0].text == Statement.PHONY.value
        if len(tokens) == 1:
            what = "phony target" if phony else "file to build"
            raise ParseError(f"no name given to the {what}", tokens[0].location)
        output = tokens[1].text
        if not output:
            raise ParseError("cannot have empty rule name", tokens[1].location)
        autodeps = False
        if len(tokens) > 2:
            keyword = tokens[2].text
            if keyword == "autodeps" and not phony:
                autodeps = self.context.backend.header_deps
            elif keyword != "deps":
                raise ParseError("expected 'deps' keyword here", tokens[2].location)
        self._open_rule(
            RuleBuilder(
                kind=RuleKind.PHONY if phony else RuleKind.SINGLE_FILE,
                output=output,
                location=tokens[0].location,
                dependencies=[t.text for t in tokens[3:]],
                autodeps=autodeps,
                autodeps_file=output + ".d",
            )
        )

    def _build_files(self, tokens: list[Token]) -> None:
        """Open a rule building one file per source.

        ``build_files [optional] PREFIX foreach SOURCES... as FORMAT
        [deps|autodeps DEPS...]``.

        Sources are paths, ``glob:PATTERN`` or ``popen:COMMAND``. Defines
        ``PREFIX.files`` holding every output.
        """
        self._close_rule()
        i = 1
        if len(tokens) == i:
            raise ParseError(
                "expected variable name or 'optional' after", tokens[0].location
            )
        optional = tokens[i].text == "optional"
        if optional:
            i += 1
            if len(tokens) == i:
                raise ParseError("no variable name given after", tokens[i - 1].location)
        prefix = tokens[i].text
        i += 1
        if len(tokens) == i:
            raise ParseError("expected 'foreach' keyword after", tokens[i - 1].location)
        if tokens[i].text != "foreach":
            raise ParseError("expected 'foreach' keyword here", tokens[i].location)
        foreach = tokens[i]
        i += 1
        begin = i
        while i < len(tokens) and tokens[i].text != "as":
            i += 1
        sources = tokens[begin:i]
        if not sources and not optional:
            if i < len(tokens):
                raise ParseError(
                    "keyword 'as' unexpected, expected some files/globs here",
                    tokens[i].location,
                )
            raise ParseError("expected some files/globs here", foreach.location)
        if i == len(tokens):
            raise ParseError("expected 'as' keyword after", tokens[-1].location)
        i += 1
        if i == len(tokens):
            raise ParseError("expected filename format after", tokens[i - 1].location)
        fmt = tokens[i].text
        i += 1

        items: list[tuple[str, str]] = []
        for source in sources:
            items.extend(self._expand_source(source, fmt))
        if not items and not optional:
            raise ParseError(
                "cannot find any file for the given globbing(s)", sources[0].location
            )

        autodeps = False
        dependencies: list[str] = []
        if i < len(tokens):
            keyword = tokens[i].text
            if keyword == "autodeps":
                autodeps = self.context.backend.header_deps
            elif keyword != "deps":
                raise ParseError(
                    "expected 'deps' or 'autodeps' keyword here", tokens[i].location
                )
            dependencies = [t.text for t in tokens[i + 1 :]]

        self.context.variables.add(
            prefix + ".files",
            " ".join(output for output, _ in items),
            used=True,
            location=tokens[0].location,
        )
        self._open = RuleBuilder(
            kind=RuleKind.MULTIPLE_FILES,
            output=prefix,
            location=tokens[0].location,
            dependencies=dependencies,
            autodeps=autodeps,
            items=items,
        )

    def _expand_source(self, source: Token, fmt: str) -> list[tuple[str, str]]:
        """``(output, input)`` pairs for one ``build_files`` source."""
        text = source.text
        if text.startswith("glob:"):
            directory, pattern = posixpath.split(text[5:].replace("\\", "/"))
            items = []
            for match in self.context.host.glob(posixpath.join(directory, pattern)):
                match = match.replace("\\", "/")
                relative = match[len(directory) + 1 :] if directory else match
                items.append((format_output(fmt, relative.replace("/", ".")), match))
            return items

        if text.startswith("popen:"):
            command = text[6:]
            output, code = self.context.host.run_process(command)
            if code != 0:
                raise ParseError(f"process failed with code {code}", source.location)
            items = []
            for line in output.splitlines():
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if ";" in line:
                    parts = line.split(";")
                    if len(parts) != 2:
                        raise ParseError("output of command misformed", source.location)
                    directory, relative = parts
                    name = format_output(fmt, relative.replace("/", "."))
                    items.append((name, posixpath.join(directory, relative)))
                else:
                    items.append((format_output(fmt, line), line))
            return items

        return [(format_output(fmt, text), text)]

    def _command(self, tokens: list[Token], action: Action) -> None:
        if self._open is None:
            raise ParseError("command outside of any rule", tokens[0].location)
        result = self.context.translator.translate(
            tokens, action, autodeps=self._open.autodeps
        )
        self._open.commands.append(result.text)
        if result.autodeps_family is not None:
            self._open.autodeps_family = result.autodeps_family

    # Rule closing

    def add_target(self, rule: RuleBuilder, *, self_dependency: bool = True) -> None:
        """Close ``rule`` into the graph.

        A MULTIPLE_FILES rule becomes one SINGLE_FILE rule per item. A
        SINGLE_FILE rule is stored as-is and as a force variant.

        Args:
            rule: The rule to close.
            self_dependency: Make the rule depend on the build file when
                self generation is enabled.

        Raises:
            DuplicateTargetError: If a target is already defined.
        """
        context = self.context
        shell = context.shell

        if rule.kind is RuleKind.MULTIPLE_FILES:
            with context.silenced():
                for output, source in rule.items:
                    item = shell.ify(source)
                    self.add_target(
                        RuleBuilder(
                            kind=RuleKind.SINGLE_FILE,
                            output=output,
                            location=rule.location,
                            dependencies=[
                                item if d == "@item" else d for d in rule.dependencies
                            ],
                            commands=[c.replace("@item", item) for c in rule.commands],
                            autodeps=rule.autodeps,
                            autodeps_file=output + ".d",
                            autodeps_family=rule.autodeps_family,
                        ),
                        self_dependency=self_dependency,
                    )
            if not context.quiet:
                logger.info(
                    "Add %d new targets from globbing: '%s'",
                    len(rule.items),
                    rule.output,
                )
            return

        output = shell.ify(rule.output)
        inputs = " ".join(shell.ify(d) for d in rule.dependencies)
        commands = [
            c.replace("@out", output).replace("@in", inputs) for c in rule.commands
        ]
        autodeps = rule.autodeps and rule.autodeps_family is not None
        if autodeps:
            flags = autodeps_flags(rule.autodeps_family, rule.autodeps_file, shell)
            as_is_commands = [c.replace(AUTODEPS_PLACEHOLDER, flags) for c in commands]
        else:
            as_is_commands = [_drop_placeholder(c) for c in commands]

        dependencies = list(rule.dependencies)
        if context.generate_self and self_dependency:
            dependencies.append(context.output_file)

        as_is = RuleDescriptor(
            kind=rule.kind,
            target=rule.output,
            output=rule.output,
            dependencies=dependencies,
            commands=as_is_commands,
            autodeps=autodeps,
            autodeps_family=rule.autodeps_family if autodeps else None,
            autodeps_file=rule.autodeps_file if autodeps else "",
            location=rule.location,
        )
        context.rules.add(as_is)
        if not context.quiet:
            logger.info("Add new target: '%s'", as_is.target)
        if not as_is.is_phony:
            context.outputs.append(shell.sanitize(rule.output))

        if rule.kind in (RuleKind.PHONY, RuleKind.SELF_REGENERATE):
            return
        force = RuleDescriptor(
            kind=rule.kind,
            target=force_target_name(rule.output),
            output=rule.output,
            dependencies=list(dependencies),
            commands=[_drop_placeholder(c) for c in commands],
            is_force=True,
            location=rule.location,
        )
        context.rules.add(force)
        if not context.quiet:
            logger.info("Add new target: '%s'", force.target)

    # Miscellaneous statements

    def _echo(self, tokens: list[Token]) -> None:
        print("--" + "".join(" " + t.text for t in tokens[1:]))

    def _include(self, tokens: list[Token]) -> None:
        """``include FILE...``, paths relative to the working directory."""
        if len(tokens) == 1:
            raise ParseError("no file given to include", tokens[0].location)
        for token in tokens[1:]:
            if not self.context.host.is_file(token.text):
                raise ParseError("file does not seem to exist", token.location)
            self.parse_file(token.text, token.location)

    def _install(self, tokens: list[Token]) -> None:
        """``install_file FILES... DEST`` and ``install_dir DIRS... DEST``."""
        if len(tokens) == 1:
            raise ParseError("expected file to install after", tokens[0].location)
        if len(tokens) == 2:
            raise ParseError("expected path for installation", tokens[1].location)
        destination = tokens[-1].text
        pairs = [(destination, t.text) for t in tokens[1:-1]]
        if tokens[0].text == Statement.INSTALL_FILE.value:
            self.context.rules.file_install_paths.extend(pairs)
        else:
            self.context.rules.dir_install_paths.extend(pairs)

    def _package_name(self, tokens: list[Token]) -> None:
        if len(tokens) == 1:
            raise ParseError("expecting package name after", tokens[0].location)
        if len(tokens) > 2:
            raise ParseError("extra token here", tokens[2].location)
        self.context.package_name = tokens[1].text

    def _disable(self, tokens: list[Token]) -> None:
        if len(tokens) > 1:
            raise ParseError("unexpected token here", tokens[1].location)
        context = self.context
        what = tokens[0].text[len("disable_") :]
        if what == "all":
            context.generate_all = False
        elif what == "update":
            context.generate_update = False
        elif what == "clean":
            context.generate_clean = False
        elif what == "install":
            context.generate_install = False
        else:
            context.generate_package = False

    # Conditional translation

    def _begin_translate_if(self, tokens: list[Token]) -> None:
        """``begin_translate_if A ==|!= B``."""
        context = self.context
        if context.translate_zone is not None:
            raise ParseError(
                "nested 'begin_translate_if', previous one on line "
                f"{context.translate_zone.line}",
                tokens[0].location,
            )
        if len(tokens) == 1:
            raise ParseError("expecting expression after", tokens[0].location)
        if len(tokens) == 2:
            raise ParseError("expecting comparison operator after", tokens[1].location)
        operator = tokens[2].text
        if operator not in ("==", "!="):
            raise ParseError(
                "comparison operator must be '==' or '!='", tokens[2].location
            )
        if len(tokens) == 3:
            raise ParseError("expecting expression after", tokens[2].location)
        if len(tokens) > 4:
            raise ParseError("unexpected token", tokens[4].location)
        equal = tokens[1].text == tokens[3].text
        context.translating = equal if operator == "==" else not equal
        context.translate_zone = tokens[0].location

    def _end_translate(self, tokens: list[Token]) -> None:
        context = self.context
        if context.translate_zone is None:
            raise ParseError(
                "unexpected 'end_translate', no corresponding 'begin_translate_if'",
                tokens[0].location,
            )
        if len(tokens) > 1:
            raise ParseError("unexpected token here", tokens[1].location)
        context.translating = True
        context.translate_zone = None


def _forward_slashes(path: str, windows: bool) -> str:
    return path.replace("\\", "/") if windows else path


def _drop_placeholder(command: str) -> str:
    return command.replace(" " + AUTODEPS_PLACEHOLDER, "").replace(
        AUTODEPS_PLACEHOLDER, ""
    )

