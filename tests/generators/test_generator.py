# SPDX-License-Identifier: MIT
"""Tests for ninjaconf.generators.generator."""

import pytest

from ninjaconf.core.rules import RuleDescriptor, RuleGraph, RuleKind
from ninjaconf.generators import (
    BaseGenerator,
    Generator,
    MakeGenerator,
    NinjaGenerator,
    get_generator,
)
from ninjaconf.generators.generator import rule_name


def rule(target, kind=RuleKind.SINGLE_FILE, output=None):
    return RuleDescriptor(kind=kind, target=target, output=output or target)


class TestGetGenerator:
    def test_backends(self):
        assert isinstance(get_generator("ninja"), NinjaGenerator)
        assert get_generator("gnumake").flavor == "gnu"
        assert get_generator("make").flavor == "posix"
        assert isinstance(get_generator("nmake"), MakeGenerator)

    def test_protocol(self):
        assert isinstance(get_generator("ninja"), Generator)

    def test_unknown(self):
        with pytest.raises(ValueError, match="unknown backend 'scons'"):
            get_generator("scons")


class TestBaseGenerator:
    def test_generate_not_implemented(self, context):
        with pytest.raises(NotImplementedError):
            BaseGenerator("x").generate(RuleGraph(), context)

    def test_repr(self):
        assert repr(NinjaGenerator()) == "NinjaGenerator('ninja')"

    def test_ordered(self):
        rules = RuleGraph()
        for target in ("clean", "b", "install", "a", "all"):
            rules.add(rule(target))
        order = [r.target for r in BaseGenerator("x").ordered(rules)]
        assert order == ["all", "a", "b", "install", "clean"]

    def test_output_dir_command(self, context, new_context, windows_platform):
        base = BaseGenerator("x")
        assert base.output_dir_command(rule("a.o"), context) is None
        assert base.output_dir_command(rule("o/a.o"), context) == "mkdir -p o"
        phony = rule("o/run", kind=RuleKind.PHONY)
        assert base.output_dir_command(phony, context) is None
        windows = new_context(platform=windows_platform)
        assert base.output_dir_command(rule("o/x/a.obj"), windows) == (
            "if not exist o\\x md o\\x"
        )


class TestRuleName:
    def test_rule_name(self):
        assert rule_name("obj/a.o") == "obj.a.o"
        assert rule_name("my app+") == "my_app_"
        assert rule_name("f_x\\y") == "f_x.y"
