"""Forced dependency table.

For plugins that can't or won't declare Provides and Requires headers, the
table patches in extra features by plugin id. It is loaded once at startup,
either from a local JSON file or from a remote document with a local cache.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plugdeps.features import FeatureKind, normalize_features

logger = logging.getLogger(__name__)


class ForcedTableError(Exception):
    """Forced dependency document could not be loaded or validated."""


class ForcedDependencyTable(BaseModel):
    """Override Provides/Requires entries keyed by plugin id."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    provides: dict[str, list[str]] = Field(default_factory=dict, alias="Provides")
    requires: dict[str, list[str]] = Field(default_factory=dict, alias="Requires")

    def forced(self, kind: FeatureKind | str, plugin_id: str) -> frozenset[str]:
        """Normalized forced features of the given kind for a plugin."""
        kind = FeatureKind.coerce(kind)
        table = self.provides if kind is FeatureKind.PROVIDES else self.requires
        return normalize_features(table.get(plugin_id))


DEFAULT_FORCED_DEPENDENCIES = ForcedDependencyTable(
    provides={},
    requires={
        "test-requires2.php": ["__CORE__XML-RPC"],
        "jetpack/jetpack.php": ["__CORE__XML-RPC"],
    },
)


def parse_forced_table(document: str | bytes) -> ForcedDependencyTable:
    """Parse and validate a forced dependency JSON document.

    Raises:
        ForcedTableError: If the document is not valid JSON or has the wrong shape
    """
    try:
        data = json.loads(document)
    except json.JSONDecodeError as e:
        raise ForcedTableError(f"Invalid JSON in forced dependency table: {e}") from e

    if data is None:
        return ForcedDependencyTable()

    try:
        return ForcedDependencyTable.model_validate(data)
    except ValidationError as e:
        raise ForcedTableError(f"Forced dependency table validation failed: {e}") from e


def load_forced_table(path: Path | str | None) -> ForcedDependencyTable:
    """Load the forced dependency table from a JSON file.

    Args:
        path: JSON file path. If None or missing, the built-in default table is used.

    Raises:
        ForcedTableError: If the file exists but is invalid
    """
    if path is None:
        return DEFAULT_FORCED_DEPENDENCIES
    path = Path(path).expanduser()
    if not path.exists():
        logger.debug("No forced dependency table at %s, using defaults", path)
        return DEFAULT_FORCED_DEPENDENCIES

    try:
        document = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ForcedTableError(f"Failed to read forced dependency table {path}: {e}") from e
    return parse_forced_table(document)


def fetch_forced_table(
    url: str,
    cache_path: Path | str | None = None,
    timeout: float = 10.0,
) -> ForcedDependencyTable:
    """Fetch the forced dependency table from a remote JSON document.

    On success the document is written to ``cache_path`` (if given). If the
    request fails the cached copy is used instead, and failing that the
    built-in defaults.

    Raises:
        ForcedTableError: If the fetched document is invalid
    """
    cache = Path(cache_path).expanduser() if cache_path else None

    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Failed to fetch forced dependency table from %s: %s", url, e)
        return load_forced_table(cache)

    table = parse_forced_table(response.content)
    if cache is not None:
        cache.parent.mkdir(parents=True, exist_ok=True)
        cache.write_bytes(response.content)
        logger.debug("Cached forced dependency table at %s", cache)

    logger.info(
        "Loaded forced dependency table from %s (%d provides, %d requires)",
        url,
        len(table.provides),
        len(table.requires),
    )
    return table
