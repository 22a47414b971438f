# SPDX-License-Identifier: MIT
"""Tests for ninjaconf.shell.translator."""

import pytest

from ninjaconf.configure.platform import Platform
from ninjaconf.core.errors import ParseError
from ninjaconf.core.tokenizer import Action, tokenize
from ninjaconf.toolchains.common import AUTODEPS_PLACEHOLDER
from ninjaconf.toolchains.toolchain import Family


@pytest.fixture
def translate(context, loc):
    def run(text, action=Action.TRANSLATE, autodeps=False):
        return context.translator.translate(tokenize(text, loc), action, autodeps)

    return run


class TestSequences:
    def test_and(self, translate):
        assert translate("mkdir out && touch out/a").text == (
            "mkdir -p out && touch out/a"
        )

    def test_semicolon(self, translate):
        assert translate("touch a ; touch b").text == "touch a ; touch b"

    def test_semicolon_on_windows(self, new_context, loc):
        context = new_context(platform=Platform("windows", "amd64"))
        result = context.translator.translate(tokenize("touch a ; touch b", loc))
        assert result.text == "echo >a & echo >b"

    def test_redirection(self, translate):
        assert translate("cat a b > c").text == "cat a b >c"

    def test_redirection_then_separator(self, translate):
        assert translate("echo hi > out.txt && cat out.txt").text == (
            "echo hi >out.txt && cat out.txt"
        )

    def test_redirection_then_semicolon(self, translate):
        assert translate("cat a >> log ; touch b").text == "cat a >>log ; touch b"

    def test_redirection_needs_file(self, translate):
        with pytest.raises(ParseError, match="expected file after"):
            translate("cat a >")

    def test_pipe(self, translate):
        result = translate("my-gen --all | sort", action=Action.PERMISSIVE)
        assert result.text == "my-gen --all | sort"

    def test_unknown_command(self, translate):
        with pytest.raises(ParseError, match="unknown command"):
            translate("my-gen --out x")

    def test_raw(self, translate):
        result = translate('anything "with space" --goes', action=Action.RAW)
        assert result.text == 'anything "with space" --goes'


class TestConditionals:
    def test_if(self, translate):
        assert translate("if a != b ( touch x )").text == (
            'if [ "a" != "b" ]; then touch x ; fi'
        )

    def test_if_else_on_windows(self, new_context, loc):
        context = new_context(platform=Platform("windows", "amd64"))
        tokens = tokenize("if a == b ( touch x ) else ( touch y )", loc)
        assert context.translator.translate(tokens).text == (
            'if "a" == "b" ( echo >x ) else ( echo >y )'
        )

    def test_missing_paren(self, translate):
        with pytest.raises(ParseError, match="cannot find corresponding"):
            translate("if a == b ( touch x")

    def test_bad_operator(self, translate):
        with pytest.raises(ParseError, match="expected valid comparison operator"):
            translate("if a = b ( touch x )")

    def test_missing_else(self, translate):
        with pytest.raises(ParseError, match="expected 'else' keyword here"):
            translate("if a == b ( touch x ) ( touch y )")


class TestCompilers:
    def test_compiler_head(self, translate):
        assert translate("cc -O2 -c a.c -o a.o").text == "gcc -O2 -c a.c -o a.o"

    def test_autodeps_records_family(self, translate):
        result = translate("c++ -c a.cpp -o a.o", autodeps=True)
        assert result.text == f"g++ -c a.cpp -o a.o {AUTODEPS_PLACEHOLDER}"
        assert result.autodeps_family is Family.GCC

    def test_no_family_without_autodeps(self, translate):
        assert translate("cc -c a.c").autodeps_family is None

    def test_compiler_inside_sequence(self, translate):
        result = translate("mkdir obj && cc -c a.c -o obj/a.o")
        assert result.text == "mkdir -p obj && gcc -c a.c -o obj/a.o"
