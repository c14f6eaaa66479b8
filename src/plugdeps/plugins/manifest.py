"""Plugin records as handed to the resolver."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def parse_feature_header(text: str | None) -> list[str]:
    """Split a comma-separated Provides/Requires header value.

    Whitespace is stripped and empty entries dropped. Case is preserved;
    the resolver normalizes when comparing.
    """
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def _feature_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return parse_feature_header(value)
    return [str(v) for v in value if v]


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class PluginRecord:
    """One installed plugin and its raw feature declarations.

    ``active`` is owned by the host; the resolver only reads it.
    """

    id: str
    name: str = ""
    provides: list[str] = field(default_factory=list)
    requires: list[str] = field(default_factory=list)
    version: str = ""
    description: str = ""
    author: str = ""
    active: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.id

    @classmethod
    def from_dict(cls, plugin_id: str, data: Mapping[str, Any] | None) -> PluginRecord:
        """Build a record from loose plugin metadata.

        Accepts header-style keys (``Provides``, ``Plugin Name``) as well as
        lowercase ones. Absent fields become empty.
        """
        data = data or {}

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return None

        return cls(
            id=plugin_id,
            name=pick("name", "Name", "Plugin Name") or "",
            provides=_feature_list(pick("provides", "Provides")),
            requires=_feature_list(pick("requires", "Requires")),
            version=pick("version", "Version") or "",
            description=pick("description", "Description") or "",
            author=pick("author", "Author") or "",
            active=_flag(pick("active", "Active")),
        )
