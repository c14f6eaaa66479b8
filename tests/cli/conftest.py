"""Shared fixtures for CLI tests."""

import logging
from pathlib import Path

import pytest
import yaml
from rich.console import Console

PHP_TEMPLATE = """<?php
/**
 * Plugin Name: {name}
 * Provides: {provides}
 * Requires: {requires}
 */
"""


def _write_plugin(path: Path, name: str, provides: str = "", requires: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(PHP_TEMPLATE.format(name=name, provides=provides, requires=requires))


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Render tables without wrapping or truncating cells."""
    monkeypatch.setattr("plugdeps.cli.plugin_cmd.console", Console(width=200))


@pytest.fixture(autouse=True)
def restore_log_level():
    """Undo log level changes made by build_resolver."""
    package_logger = logging.getLogger("plugdeps")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def plugin_site(tmp_path: Path) -> Path:
    """A plugins directory with a small dependency chain.

    ``Core`` (active) provides CORE_API, ``Addon`` (active) requires it,
    ``Extra`` (inactive) requires CORE_API and MISSING_FEATURE.
    """
    plugin_dir = tmp_path / "plugins"
    _write_plugin(plugin_dir / "core" / "core.php", "Core", provides="core_api")
    _write_plugin(plugin_dir / "addon" / "addon.php", "Addon", requires="core_api")
    _write_plugin(plugin_dir / "extra.php", "Extra", requires="core_api, missing_feature")
    _write_plugin(plugin_dir / "solo.php", "Solo")

    state_file = tmp_path / "state.yaml"
    state_file.write_text(
        yaml.safe_dump({"active_plugins": ["core/core.php", "addon/addon.php"]})
    )
    return tmp_path


@pytest.fixture
def config_file(plugin_site: Path) -> Path:
    """Config file pointing at the plugin site, with no forced overrides."""
    forced = plugin_site / "forced.json"
    forced.write_text("{}")

    path = plugin_site / "plugdeps.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "plugins": {
                    "directory": str(plugin_site / "plugins"),
                    "state_file": str(plugin_site / "state.yaml"),
                },
                "forced": {"path": str(forced)},
            }
        )
    )
    return path
