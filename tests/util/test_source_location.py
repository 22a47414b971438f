# SPDX-License-Identifier: MIT
"""Tests for ninjaconf.util.source_location."""

from ninjaconf.core.errors import ParseError
from ninjaconf.util.source_location import Phase, SourceLocation


class TestSourceLocation:
    def test_str(self):
        assert str(SourceLocation("build.ninjaconf", 12)) == "build.ninjaconf:12"

    def test_render_without_source(self):
        loc = SourceLocation("a.ninjaconf", 3)
        assert loc.render("oops") == "a.ninjaconf:3: oops"

    def test_render_points_at_column(self):
        loc = SourceLocation("a.ninjaconf", 1, column=4, source="set X")
        text = loc.render("bad name")
        lines = text.splitlines()
        assert lines[0] == "a.ninjaconf:1: before variable expansion"
        assert lines[2] == "set X"
        assert lines[3] == "    ^~~~~ bad name"

    def test_render_elides_long_lines(self):
        source = "a" * 40 + "X" + "b" * 40
        loc = SourceLocation("f", 1, column=40, source=source)
        text = loc.render("here")
        window = text.splitlines()[2]
        assert window.startswith("... ")
        assert window.endswith("... ")
        caret = text.splitlines()[3]
        assert window[caret.index("^")] == "X"

    def test_phase_is_reported(self):
        loc = SourceLocation("f", 2, source="echo $X").with_source(
            "echo 5", Phase.AFTER
        )
        assert "after variable expansion" in loc.render("msg")
        assert loc.column == 0

    def test_at_moves_column(self):
        loc = SourceLocation("f", 2, column=1)
        assert loc.at(7).column == 7
        assert loc.at(7).line == 2

    def test_error_message_uses_location(self):
        err = ParseError("boom", SourceLocation("f", 9))
        assert str(err) == "f:9: boom"
        assert err.message == "boom"
