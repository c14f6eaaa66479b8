"""Plugin records and the registries that supply them to the resolver."""

from plugdeps.plugins.loader import DirectoryRegistry, read_plugin_headers
from plugdeps.plugins.manifest import PluginRecord, parse_feature_header
from plugdeps.plugins.registry import InMemoryRegistry, PluginRegistry

__all__ = [
    "DirectoryRegistry",
    "InMemoryRegistry",
    "PluginRecord",
    "PluginRegistry",
    "parse_feature_header",
    "read_plugin_headers",
]
