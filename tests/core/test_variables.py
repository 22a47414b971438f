# SPDX-License-Identifier: MIT
"""Tests for ninjaconf.core.variables."""

from ninjaconf.core.variables import VariableStore


class TestVariableStore:
    def test_add_and_expand(self):
        store = VariableStore()
        store.add("A", "1")
        assert store.expand("A") == "1"
        assert store.get("A").used

    def test_expand_unknown(self):
        assert VariableStore().expand("A") is None

    def test_get_does_not_mark_used(self):
        store = VariableStore()
        store.add("A", "1")
        store.get("A")
        assert store.unused_names() == ["A"]

    def test_force_overwrites(self):
        store = VariableStore()
        store.add("A", "1")
        store.add("A", "2")
        assert store.get("A").value == "2"

    def test_first_writer_wins_without_force(self):
        store = VariableStore()
        store.add("A", "from -D", force=False)
        store.add("A", "default", force=False)
        assert store.get("A").value == "from -D"

    def test_names_keep_definition_order(self):
        store = VariableStore()
        for name in ("b", "a", "c"):
            store.add(name, "")
        store.expand("a")
        assert store.names() == ["b", "a", "c"]
        assert store.used_names() == ["a"]
        assert store.unused_names() == ["b", "c"]
        assert "a" in store
        assert len(store) == 3
