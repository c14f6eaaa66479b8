"""Plugin discovery from a plugins directory.

Discovers plugins from:
1. Single files at the top of the plugin directory (``hello.php``)
2. Files one directory deep (``jetpack/jetpack.php``)

A file counts as a plugin when its header declares ``Plugin Name:``.
Activation state is kept in a YAML state file listing active plugin ids.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from plugdeps.plugins.manifest import PluginRecord, parse_feature_header

logger = logging.getLogger(__name__)

PLUGIN_SUFFIXES = (".php", ".py")

# Only the start of the file is scanned for header fields
HEADER_BYTES = 8192

HEADER_FIELDS = {
    "name": "Plugin Name",
    "version": "Version",
    "description": "Description",
    "author": "Author",
    "provides": "Provides",
    "requires": "Requires",
}


def read_plugin_headers(path: Path) -> dict[str, str]:
    """Read header fields from the top of a plugin file.

    Header lines look like ``Provides: FOO, BAR`` and may be prefixed with
    comment markers (``*``, ``#``, ``//``).

    Returns:
        Mapping of field key (see HEADER_FIELDS) to raw value; absent fields omitted
    """
    with open(path, encoding="utf-8", errors="replace") as f:
        text = f.read(HEADER_BYTES).replace("\r", "\n")

    headers: dict[str, str] = {}
    for key, label in HEADER_FIELDS.items():
        match = re.search(
            rf"^[ \t/*#@]*{re.escape(label)}:(.*)$", text, flags=re.MULTILINE | re.IGNORECASE
        )
        if match:
            value = re.sub(r"\s*(?:\*/|\?>).*", "", match.group(1)).strip()
            headers[key] = value
    return headers


class DirectoryRegistry:
    """Registry backed by a plugins directory and a YAML activation state file."""

    def __init__(
        self,
        plugin_dir: str | Path = "~/.plugdeps/plugins",
        state_file: str | Path | None = None,
        blocked: list[str] | None = None,
    ) -> None:
        self.plugin_dir = Path(plugin_dir).expanduser()
        self.state_file = Path(state_file).expanduser() if state_file else None
        self.blocked = set(blocked or [])
        # Active ids as of the last list_plugins() call
        self._active: frozenset[str] | None = None

    def list_plugins(self) -> dict[str, PluginRecord]:
        """Discover installed plugins, sorted by id.

        Active flags are filled in from the state file.
        """
        active = self._active = frozenset(self._load_active())
        plugins: dict[str, PluginRecord] = {}
        for plugin_id, path in self._discover():
            if plugin_id in self.blocked:
                logger.info("Plugin '%s' is blocked, skipping", plugin_id)
                continue
            try:
                headers = read_plugin_headers(path)
            except OSError as e:
                logger.warning("Failed to read plugin '%s' from %s: %s", plugin_id, path, e)
                continue
            if not headers.get("name"):
                continue

            plugins[plugin_id] = PluginRecord(
                id=plugin_id,
                name=headers["name"],
                provides=parse_feature_header(headers.get("provides")),
                requires=parse_feature_header(headers.get("requires")),
                version=headers.get("version", ""),
                description=headers.get("description", ""),
                author=headers.get("author", ""),
                active=plugin_id in active,
            )

        logger.debug("Discovered %d plugins in %s", len(plugins), self.plugin_dir)
        return dict(sorted(plugins.items()))

    def get_plugin(self, plugin_id: str) -> PluginRecord | None:
        """Get a plugin by id."""
        return self.list_plugins().get(plugin_id)

    def is_active(self, plugin_id: str) -> bool:
        """Answer from the state read by the last list_plugins() call.

        The state file is only read here when nothing has been listed yet.
        """
        if self._active is None:
            self._active = frozenset(self._load_active())
        return plugin_id in self._active

    def activate(self, plugin_id: str) -> bool:
        """Mark a plugin active. Returns False if it is not installed."""
        if self.get_plugin(plugin_id) is None:
            return False
        active = self._load_active()
        if plugin_id not in active:
            active.append(plugin_id)
            self._save_active(active)
        self._active = frozenset(active)
        logger.info("Plugin '%s' activated", plugin_id)
        return True

    def deactivate(self, plugin_id: str) -> bool:
        """Mark a plugin inactive. Returns False if it is not installed."""
        if self.get_plugin(plugin_id) is None:
            return False
        active = self._load_active()
        if plugin_id in active:
            active.remove(plugin_id)
            self._save_active(active)
        self._active = frozenset(active)
        logger.info("Plugin '%s' deactivated", plugin_id)
        return True

    def _discover(self) -> list[tuple[str, Path]]:
        if not self.plugin_dir.exists():
            return []

        found: list[tuple[str, Path]] = []
        for entry in sorted(self.plugin_dir.iterdir()):
            if entry.name.startswith("_"):
                continue
            if entry.is_file() and entry.suffix in PLUGIN_SUFFIXES:
                found.append((entry.name, entry))
            elif entry.is_dir():
                for child in sorted(entry.iterdir()):
                    if (
                        child.is_file()
                        and child.suffix in PLUGIN_SUFFIXES
                        and not child.name.startswith("_")
                    ):
                        found.append((f"{entry.name}/{child.name}", child))
        return found

    def _load_active(self) -> list[str]:
        if self.state_file is None or not self.state_file.exists():
            return []
        with open(self.state_file) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            return []
        active = data.get("active_plugins") or []
        if not isinstance(active, list):
            logger.warning("Ignoring non-list active_plugins in %s", self.state_file)
            return []
        return [str(p) for p in active]

    def _save_active(self, active: list[str]) -> None:
        if self.state_file is None:
            raise RuntimeError("No state file configured; cannot persist activation state")
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, "w") as f:
            yaml.safe_dump({"active_plugins": active}, f, default_flow_style=False)
