"""Locating, reading and writing the plugdeps YAML configuration.

The config file is looked up in this order:

1. An explicit path (``plugdeps plugin list -c ./site.yaml``)
2. The ``PLUGDEPS_CONFIG`` environment variable
3. ``~/.plugdeps/plugdeps.yaml``

A file that doesn't exist means zero-config: every setting takes its default.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from plugdeps.config.schema import PlugdepsConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PLUGDEPS_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".plugdeps" / "plugdeps.yaml"


class ConfigError(Exception):
    """Configuration loading or validation error."""


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Pick the config file to use, expanding ``~``."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _read_document(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration validation failed: {path} must contain a mapping, "
            f"got {type(data).__name__}"
        )
    return data


def load_config(path: str | Path | None = None) -> PlugdepsConfig:
    """Load and validate the configuration.

    Raises:
        ConfigError: If the file exists but is not valid YAML or fails validation
    """
    path = resolve_config_path(path)
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return PlugdepsConfig()

    try:
        config = PlugdepsConfig.model_validate(_read_document(path))
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
    logger.debug("Loaded config from %s", path)
    return config


def save_config(config: PlugdepsConfig, path: str | Path | None = None) -> Path:
    """Write the configuration as YAML, creating parent directories.

    Returns:
        The path written to
    """
    path = resolve_config_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
    return path
