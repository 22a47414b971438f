# SPDX-License-Identifier: MIT
"""Shared fixtures: an in-memory host and ready-made run states."""

from __future__ import annotations

import fnmatch
import posixpath

import pytest

from ninjaconf.configure.platform import Platform
from ninjaconf.core.context import BACKENDS, InterpreterContext
from ninjaconf.core.interpreter import Interpreter
from ninjaconf.core.tokenizer import Action, tokenize
from ninjaconf.shell.commands import Shell
from ninjaconf.toolchains.compilers import translate_compiler
from ninjaconf.toolchains.registry import ToolchainRegistry
from ninjaconf.toolchains.toolchain import (
    Architecture,
    Family,
    Language,
    ToolchainInfo,
)
from ninjaconf.util.host import HostSystem
from ninjaconf.util.source_location import SourceLocation

LINUX = Platform("linux", "x86_64")
WINDOWS = Platform("windows", "amd64")


class FakeHost(HostSystem):
    """HostSystem keeping files in a dict and answering commands from a table.

    Attributes:
        files: Path to content of every file that exists.
        processes: Command to ``(output, exit code)``; unknown commands
            exit with 127.
        env: Environment variables.
        commands: Every command run, in order.
    """

    def __init__(self, files=None, processes=None, env=None, path=None):
        self.files: dict[str, str] = dict(files or {})
        self.processes: dict[str, tuple[str, int]] = dict(processes or {})
        self.env: dict[str, str] = dict(env or {})
        self.path: list[str] = list(path or [])
        self.commands: list[str] = []

    def read_text(self, path):
        try:
            return self.files[posixpath.normpath(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path, text):
        self.files[posixpath.normpath(path)] = text

    def glob(self, pattern):
        pattern = posixpath.normpath(pattern)
        depth = pattern.count("/")
        return sorted(
            p
            for p in self.files
            if p.count("/") == depth and fnmatch.fnmatchcase(p, pattern)
        )

    def run_process(self, command):
        self.commands.append(command)
        return self.processes.get(command, ("", 127))

    def exists(self, path):
        return self.is_file(path) or self.is_dir(path)

    def is_dir(self, path):
        prefix = posixpath.normpath(path) + "/"
        return any(p.startswith(prefix) for p in self.files)

    def is_file(self, path):
        return posixpath.normpath(path) in self.files

    def is_exe(self, path):
        return self.is_file(path)

    def getenv(self, name):
        return self.env.get(name)

    def path_dirs(self):
        return list(self.path)

    def realpath(self, path):
        return posixpath.normpath(path)


def make_context(host=None, platform=LINUX, backend="ninja", **kwargs):
    """A run state with cc and c++ declared as GCC 12.2 for x86_64."""
    context = InterpreterContext(
        host=host if host is not None else FakeHost(),
        platform=platform,
        backend=BACKENDS[backend],
        cmdline="ninjaconf .",
        **kwargs,
    )
    context.registry.declare("cc", "gcc", "gcc", "12.2.0", "x86_64")
    context.registry.declare("c++", "gcc", "g++", "12.2.0", "x86_64")
    return context


def run_description(text, host=None, **kwargs):
    """Interpret ``text`` as build.ninjaconf and return the run state."""
    host = host if host is not None else FakeHost()
    host.files["build.ninjaconf"] = text
    context = make_context(host, **kwargs)
    Interpreter(context).run("build.ninjaconf")
    return context


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def fake_host():
    """The FakeHost class, for tests building hosts with preset content."""
    return FakeHost


@pytest.fixture
def context(host):
    return make_context(host)


@pytest.fixture
def new_context():
    return make_context


@pytest.fixture
def interpret():
    return run_description


@pytest.fixture
def loc():
    return SourceLocation("build.ninjaconf", 1)


@pytest.fixture
def compile_line(host, loc):
    """Translate a compiler command line for a toolchain given by keywords."""

    def run(
        text,
        family=Family.GCC,
        path="gcc",
        version=120200,
        architecture=Architecture.INTEL,
        nbits=64,
        language=Language.C,
        action=Action.TRANSLATE,
        platform=LINUX,
        autodeps=False,
        registry=None,
    ):
        info = ToolchainInfo(
            name="cc",
            family=family,
            path=path,
            version=version,
            architecture=architecture,
            nbits=nbits,
            language=language,
            fully_resolved=True,
        )
        registry = registry or ToolchainRegistry(host, platform, ".")
        words = translate_compiler(
            info,
            tokenize(text, loc),
            action,
            shell=Shell(platform),
            registry=registry,
            autodeps=autodeps,
        )
        return " ".join(words)

    return run


@pytest.fixture
def windows_platform():
    return WINDOWS
