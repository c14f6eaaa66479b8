"""Tests for the in-memory plugin registry."""

import pytest

from plugdeps.plugins.manifest import PluginRecord
from plugdeps.plugins.registry import InMemoryRegistry


@pytest.fixture
def populated() -> InMemoryRegistry:
    return InMemoryRegistry(
        [
            PluginRecord(id="b.php", active=True),
            PluginRecord(id="a/a.php"),
        ]
    )


class TestInMemoryRegistry:
    def test_empty(self):
        assert InMemoryRegistry().list_plugins() == {}

    def test_insertion_order(self, populated):
        assert list(populated.list_plugins()) == ["b.php", "a/a.php"]

    def test_list_is_snapshot(self, populated):
        snapshot = populated.list_plugins()
        populated.add(PluginRecord(id="c.php"))
        assert "c.php" not in snapshot

    def test_is_active(self, populated):
        assert populated.is_active("b.php") is True
        assert populated.is_active("a/a.php") is False
        assert populated.is_active("missing.php") is False

    def test_activate_deactivate(self, populated):
        populated.activate("a/a.php")
        assert populated.is_active("a/a.php") is True

        populated.deactivate("a/a.php")
        assert populated.is_active("a/a.php") is False

    def test_activate_unknown(self, populated):
        with pytest.raises(KeyError, match="missing.php"):
            populated.activate("missing.php")

    def test_remove(self, populated):
        removed = populated.remove("b.php")
        assert removed.id == "b.php"
        assert populated.get("b.php") is None

        with pytest.raises(KeyError):
            populated.remove("b.php")

    def test_add_replaces(self, populated):
        populated.add(PluginRecord(id="b.php", name="B2"))
        assert populated.get("b.php").name == "B2"
        assert list(populated.list_plugins()) == ["b.php", "a/a.php"]
