"""Pytest configuration and shared fixtures."""

import pytest

from plugdeps.forced import ForcedDependencyTable
from plugdeps.plugins.registry import InMemoryRegistry
from plugdeps.resolver import Resolver


class UnscannableRegistry:
    """Registry stub that fails the test if anything scans it."""

    def list_plugins(self):
        raise AssertionError("registry was scanned")

    def is_active(self, plugin_id):
        raise AssertionError("registry was scanned")


@pytest.fixture
def empty_forced() -> ForcedDependencyTable:
    """Forced dependency table with no overrides."""
    return ForcedDependencyTable()


@pytest.fixture
def registry() -> InMemoryRegistry:
    """Empty in-memory registry."""
    return InMemoryRegistry()


@pytest.fixture
def resolver(registry: InMemoryRegistry, empty_forced: ForcedDependencyTable) -> Resolver:
    """Resolver over the in-memory registry with no forced overrides."""
    return Resolver(registry, forced=empty_forced)


@pytest.fixture
def unscannable_registry() -> UnscannableRegistry:
    return UnscannableRegistry()
