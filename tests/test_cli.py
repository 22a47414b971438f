# SPDX-License-Identifier: MIT
"""Tests for ninjaconf CLI."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from ninjaconf.cli import format_variables, main, parse_define, setup_logging
from ninjaconf.core.context import VariableHelp
from ninjaconf.core.errors import ConfigureError

GCC = ["-comp", "cc,gcc,gcc,12.2.0,x86_64"]

HELLO = "build_file hello deps hello.c\n\tcc hello.c -o @out\n"


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A directory holding a one-rule description, made the working directory."""
    (tmp_path / "build.ninjaconf").write_text(HELLO)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestParseDefine:
    def test_key_value(self) -> None:
        assert parse_define("A=1") == ("A", "1")
        assert parse_define("A=") == ("A", "")
        assert parse_define("A=b=c") == ("A", "b=c")

    @pytest.mark.parametrize("text", ["A", "=1"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ConfigureError, match="cannot parse define directive"):
            parse_define(text)


class TestFormatVariables:
    def test_none(self) -> None:
        assert format_variables([]) == "Project variables list: (none)\n"

    def test_table(self) -> None:
        text = format_variables([VariableHelp("CFLAGS", "Optimization flags")])
        assert text == (
            "Project variables list:\n"
            "name   | description\n"
            "---------------------------\n"
            "CFLAGS | Optimization flags\n"
        )


class TestSetupLogging:
    def test_setup_logging_normal(self) -> None:
        """Test normal logging setup."""
        # Just ensure it doesn't crash
        setup_logging(verbose=False, debug=False)

    def test_setup_logging_debug(self) -> None:
        setup_logging(verbose=False, debug=True)


class TestCLICommands:
    """Tests for the ninjaconf command."""

    def test_help(self) -> None:
        """Test ninjaconf --help."""
        result = subprocess.run(
            [sys.executable, "-m", "ninjaconf", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "ninjaconf" in result.stdout
        assert "-nodev" in result.stdout

    def test_version(self) -> None:
        """Test ninjaconf --version."""
        from ninjaconf import __version__

        result = subprocess.run(
            [sys.executable, "-m", "ninjaconf", "--version"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert __version__ in result.stdout

    def test_help_generators(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-G", "help"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Available generators:\n")
        assert "gnumake" in out

    def test_unknown_generator(self) -> None:
        with pytest.raises(SystemExit) as info:
            main(["-G", "scons"])
        assert info.value.code == 2

    def test_generator_given_twice(self) -> None:
        with pytest.raises(SystemExit):
            main(["-G", "make", "-G", "ninja"])

    def test_missing_source_dir(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([str(tmp_path / "nope")]) == 1
        assert "ninjaconf: error: cannot access source dir" in capsys.readouterr().err


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX command spelling")
class TestGenerate:
    def test_ninja(self, project: Path) -> None:
        assert main(GCC) == 0
        text = (project / "build.ninja").read_text()
        assert "build hello: hello_rule hello.c build.ninja\n" in text
        assert "  command = gcc hello.c -o hello\n" in text
        assert "rule build.ninja_rule\n" in text

    def test_nodev(self, project: Path) -> None:
        assert main(GCC + ["-nodev"]) == 0
        text = (project / "build.ninja").read_text()
        assert "build hello: hello_rule hello.c\n" in text
        assert "build.ninja_rule" not in text

    def test_make(self, project: Path) -> None:
        assert main(GCC + ["-G", "make", "-nodev"]) == 0
        text = (project / "Makefile").read_text()
        assert ".POSIX:\n" in text
        assert "hello: hello.c\n\tgcc hello.c -o hello\n" in text

    def test_output_in_subdirectory(self, project: Path) -> None:
        (project / "out").mkdir()
        assert main(GCC + ["-o", "out/build.ninja"]) == 0
        assert (project / "out" / "build.ninja").exists()

    def test_define(self, project: Path) -> None:
        (project / "build.ninjaconf").write_text(
            'ifnot_set "Optimization" CFLAGS = -O2\n'
            "build_file hello deps hello.c\n\tcc $CFLAGS hello.c -o @out\n"
        )
        assert main(GCC + ["-D", "CFLAGS=-O3", "-nodev"]) == 0
        text = (project / "build.ninja").read_text()
        assert "  command = gcc -O3 hello.c -o hello\n" in text

    def test_nothing_to_do(self, project: Path) -> None:
        (project / "build.ninjaconf").write_text("# nothing yet\n")
        assert main(GCC) == 0
        assert not (project / "build.ninja").exists()

    def test_bad_compiler_declaration(
        self, project: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["-comp", "cc"]) == 1
        assert "cannot parse compiler declaration" in capsys.readouterr().err

    def test_description_error(
        self, project: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (project / "build.ninjaconf").write_text("build_file a.o needs a.c\n")
        assert main(GCC) == 1
        assert "expected 'deps' keyword here" in capsys.readouterr().err

    def test_list_vars(
        self, project: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (project / "build.ninjaconf").write_text(
            'ifnot_set "Optimization flags" CFLAGS = -O2\n' + HELLO
        )
        assert main(["-list-vars"]) == 0
        out = capsys.readouterr().out
        assert "CFLAGS | Optimization flags\n" in out
        assert not (project / "build.ninja").exists()
