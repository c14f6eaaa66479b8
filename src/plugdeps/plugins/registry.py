"""Plugin registry interface and an in-memory implementation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from plugdeps.plugins.manifest import PluginRecord


class PluginRegistry(Protocol):
    """Source of installed plugins and their activation state."""

    def list_plugins(self) -> dict[str, PluginRecord]:
        """Return installed plugins keyed by id, in registry order."""
        ...

    def is_active(self, plugin_id: str) -> bool:
        """Return whether the plugin is currently active."""
        ...


class InMemoryRegistry:
    """Registry holding plugin records in insertion order.

    Used by tests and by hosts that already have their plugin list in memory.
    """

    def __init__(self, plugins: Iterable[PluginRecord] | None = None) -> None:
        self._plugins: dict[str, PluginRecord] = {}
        for record in plugins or []:
            self.add(record)

    def add(self, record: PluginRecord) -> None:
        """Install (or replace) a plugin record."""
        self._plugins[record.id] = record

    def remove(self, plugin_id: str) -> PluginRecord:
        """Uninstall a plugin.

        Raises:
            KeyError: If plugin not installed
        """
        if plugin_id not in self._plugins:
            raise KeyError(f"Plugin '{plugin_id}' not installed")
        return self._plugins.pop(plugin_id)

    def get(self, plugin_id: str) -> PluginRecord | None:
        return self._plugins.get(plugin_id)

    def list_plugins(self) -> dict[str, PluginRecord]:
        return dict(self._plugins)

    def is_active(self, plugin_id: str) -> bool:
        record = self._plugins.get(plugin_id)
        return record is not None and record.active

    def activate(self, plugin_id: str) -> None:
        self._set_active(plugin_id, True)

    def deactivate(self, plugin_id: str) -> None:
        self._set_active(plugin_id, False)

    def _set_active(self, plugin_id: str, active: bool) -> None:
        if plugin_id not in self._plugins:
            raise KeyError(f"Plugin '{plugin_id}' not installed")
        self._plugins[plugin_id].active = active
