"""Feature dependency resolver.

Works out, for one plugin at a time, which installed plugins supply the
features it requires and which consume the features it provides, and
whether activating or deactivating it is currently advisable.

The resolver is advisory and stateless: every query re-reads the registry
snapshot it was given and derives effective feature sets from raw
declarations. Acting on a decision is up to the host.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from plugdeps.features import (
    Direction,
    FeatureKind,
    normalize_features,
    self_feature,
)
from plugdeps.forced import DEFAULT_FORCED_DEPENDENCIES, ForcedDependencyTable
from plugdeps.plugins.manifest import PluginRecord
from plugdeps.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

ACTIVATE = "activate"
DEACTIVATE = "deactivate"

ActionsT = TypeVar("ActionsT", bound=Iterable[str])


@dataclass(frozen=True)
class PluginRef:
    """Display reference to another installed plugin."""

    id: str
    name: str
    active: bool


@dataclass
class DependencyReport:
    """Structured dependency listing for one plugin."""

    plugin_id: str
    depends_on: list[PluginRef] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    required_by: list[PluginRef] = field(default_factory=list)
    needs_nothing: bool = False
    can_activate: bool = True
    can_deactivate: bool = True


class Resolver:
    """Resolves feature dependencies against a plugin registry.

    Args:
        registry: Source of installed plugins and activation state
        forced: Forced dependency override table
    """

    def __init__(
        self,
        registry: PluginRegistry,
        forced: ForcedDependencyTable = DEFAULT_FORCED_DEPENDENCIES,
    ) -> None:
        self.registry = registry
        self.forced = forced

    def get_features(
        self, plugin_id: str, record: PluginRecord, kind: FeatureKind | str
    ) -> frozenset[str]:
        """Effective Provides or Requires features of a plugin.

        Provides always includes the plugin's implicit self feature. Both
        kinds are unioned with any forced overrides for the plugin id.

        Raises:
            InvalidArgumentError: If kind is neither Provides nor Requires
        """
        kind = FeatureKind.coerce(kind)
        if kind is FeatureKind.PROVIDES:
            declared = normalize_features(record.provides) | {self_feature(plugin_id)}
        else:
            declared = normalize_features(record.requires)
        return declared | self.forced.forced(kind, plugin_id)

    def get_unfulfilled_features(self, plugin_id: str, record: PluginRecord) -> frozenset[str]:
        """Required features that no installed plugin provides, active or not."""
        remaining = set(self.get_features(plugin_id, record, FeatureKind.REQUIRES))
        if not remaining:
            return frozenset()

        for other_id, other in self.registry.list_plugins().items():
            remaining -= self.get_features(other_id, other, FeatureKind.PROVIDES)
            if not remaining:
                break
        return frozenset(remaining)

    def calculate_dependencies(
        self,
        plugin_id: str,
        record: PluginRecord,
        kind: FeatureKind | Direction | str = FeatureKind.REQUIRES,
        active_only: bool = False,
    ) -> dict[str, PluginRecord]:
        """Installed plugins interlocking with a plugin in one direction.

        ``Requires`` finds plugins whose Provides overlap this plugin's
        Requires; ``Provides`` finds plugins whose Requires overlap this
        plugin's Provides. The plugin itself is not excluded from the scan.

        Args:
            plugin_id: Id of the plugin being queried
            record: Its plugin record
            kind: Requires/Provides (or Direction.UP/DOWN)
            active_only: Only consider currently active plugins

        Returns:
            Matching plugins keyed by id, in registry order

        Raises:
            InvalidArgumentError: If kind is not a valid direction
        """
        direction = Direction.coerce(kind)
        wanted = self.get_features(plugin_id, record, direction.from_kind)
        if not wanted:
            return {}

        matches: dict[str, PluginRecord] = {}
        for other_id, other in self.registry.list_plugins().items():
            if active_only and not self.registry.is_active(other_id):
                continue
            if wanted & self.get_features(other_id, other, direction.to_kind):
                matches[other_id] = other

        logger.debug(
            "Plugin '%s' %s: %d features matched by %d plugins%s",
            plugin_id,
            direction.from_kind.value,
            len(wanted),
            len(matches),
            " (active only)" if active_only else "",
        )
        return matches

    def can_activate(self, plugin_id: str, record: PluginRecord) -> bool:
        """Whether activating the plugin is advisable.

        Blocked when the plugin requires more features than there are
        active plugins providing any of them. This compares counts, not
        per-feature coverage.
        """
        requires = self.get_features(plugin_id, record, FeatureKind.REQUIRES)
        if not requires:
            return True
        providers = self.calculate_dependencies(
            plugin_id, record, FeatureKind.REQUIRES, active_only=True
        )
        return len(requires) <= len(providers)

    def can_deactivate(self, plugin_id: str, record: PluginRecord) -> bool:
        """Whether deactivating the plugin is advisable.

        Blocked while any active plugin requires a feature it provides.
        """
        provides = self.get_features(plugin_id, record, FeatureKind.PROVIDES)
        if not provides:
            return True
        consumers = self.calculate_dependencies(
            plugin_id, record, FeatureKind.PROVIDES, active_only=True
        )
        return not consumers

    def filter_actions(self, plugin_id: str, record: PluginRecord, actions: ActionsT) -> ActionsT:
        """Drop the activate/deactivate actions that are not currently advisable.

        Returns a new collection of the same type (list, set, tuple or dict
        keyed by action name).
        """
        blocked = set()
        if not self.can_activate(plugin_id, record):
            blocked.add(ACTIVATE)
        if not self.can_deactivate(plugin_id, record):
            blocked.add(DEACTIVATE)

        if isinstance(actions, dict):
            return type(actions)((k, v) for k, v in actions.items() if k not in blocked)
        return type(actions)(a for a in actions if a not in blocked)

    def describe(self, plugin_id: str, record: PluginRecord) -> DependencyReport:
        """Build the "Depends on" / "Required by" listing for a plugin."""
        report = DependencyReport(plugin_id=plugin_id)

        requires = self.get_features(plugin_id, record, FeatureKind.REQUIRES)
        if requires:
            providers = self.calculate_dependencies(plugin_id, record, FeatureKind.REQUIRES)
            report.depends_on = self._refs(providers)
            if len(requires) > len(providers):
                report.missing = sorted(self.get_unfulfilled_features(plugin_id, record))
        else:
            report.needs_nothing = True

        consumers = self.calculate_dependencies(plugin_id, record, FeatureKind.PROVIDES)
        report.required_by = self._refs(consumers)

        report.can_activate = self.can_activate(plugin_id, record)
        report.can_deactivate = self.can_deactivate(plugin_id, record)
        return report

    def _refs(self, plugins: dict[str, PluginRecord]) -> list[PluginRef]:
        return [
            PluginRef(id=pid, name=p.name, active=self.registry.is_active(pid))
            for pid, p in plugins.items()
        ]
