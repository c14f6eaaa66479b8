"""Feature names, feature kinds and dependency directions."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from pathlib import PurePosixPath


class InvalidArgumentError(ValueError):
    """A kind or direction discriminator outside the allowed values."""


class FeatureKind(Enum):
    """Which side of a plugin's declarations a feature set comes from."""

    PROVIDES = "Provides"
    REQUIRES = "Requires"

    @property
    def opposite(self) -> FeatureKind:
        return FeatureKind.REQUIRES if self is FeatureKind.PROVIDES else FeatureKind.PROVIDES

    @classmethod
    def lookup(cls, value: object) -> FeatureKind | None:
        """Match a case-insensitive name or value, or return None."""
        if isinstance(value, str):
            for member in cls:
                if value.lower() in (member.name.lower(), member.value.lower()):
                    return member
        return None

    @classmethod
    def coerce(cls, value: FeatureKind | str) -> FeatureKind:
        """Convert a member or its case-insensitive name/value into a FeatureKind.

        Raises:
            InvalidArgumentError: If value names neither Provides nor Requires
        """
        if isinstance(value, cls):
            return value
        member = cls.lookup(value)
        if member is not None:
            return member
        raise InvalidArgumentError(f"Feature kind expects (Provides|Requires), got {value!r}")


class Direction(Enum):
    """Direction of a dependency query.

    UP looks for plugins supplying what a plugin requires.
    DOWN looks for plugins consuming what a plugin provides.
    """

    UP = "up"
    DOWN = "down"

    @property
    def from_kind(self) -> FeatureKind:
        return FeatureKind.REQUIRES if self is Direction.UP else FeatureKind.PROVIDES

    @property
    def to_kind(self) -> FeatureKind:
        return self.from_kind.opposite

    @classmethod
    def for_kind(cls, kind: FeatureKind) -> Direction:
        return cls.UP if kind is FeatureKind.REQUIRES else cls.DOWN

    @classmethod
    def coerce(cls, value: Direction | FeatureKind | str) -> Direction:
        """Convert a direction, a feature kind or a string into a Direction.

        Raises:
            InvalidArgumentError: If value is not a recognised direction
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, FeatureKind):
            return cls.for_kind(value)
        if isinstance(value, str):
            for member in cls:
                if value.lower() in (member.name.lower(), member.value):
                    return member
            kind = FeatureKind.lookup(value)
            if kind is not None:
                return cls.for_kind(kind)
        raise InvalidArgumentError(
            f"Direction expects (up|down|Provides|Requires), got {value!r}"
        )


def canonical(name: str) -> str:
    """Canonical (upper-cased) form of a feature name."""
    return name.upper()


def normalize_features(values: Iterable[str] | None) -> frozenset[str]:
    """Canonicalize feature names into a set, dropping blanks."""
    if not values:
        return frozenset()
    return frozenset(canonical(v) for v in values if v and v.strip())


def self_feature(plugin_id: str) -> str:
    """Feature every plugin implicitly provides, derived from its identifier.

    ``jetpack/jetpack.php`` gives ``JETPACK_JETPACK``; a plugin with no
    containing directory, like ``hello.php``, gives ``_HELLO``.
    """
    path = PurePosixPath(plugin_id.replace("\\", "/"))
    group = str(path.parent)
    if group == ".":
        group = ""
    return canonical(f"{group}_{path.stem}")
