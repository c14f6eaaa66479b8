"""plugdeps - Feature-based dependency resolution for plugin hosts.

Each plugin may declare named features it Provides and features it Requires.
plugdeps works out which installed plugins supply or consume those features
and whether activating or deactivating a plugin is currently advisable.

Key modules:

- :mod:`plugdeps.features` - Feature names, kinds and directions
- :mod:`plugdeps.plugins` - Plugin records and registries (in-memory, on-disk)
- :mod:`plugdeps.forced` - Forced dependency override table
- :mod:`plugdeps.resolver` - The dependency resolver and eligibility decisions
- :mod:`plugdeps.config` - YAML configuration
- :mod:`plugdeps.cli` - Admin command line interface
"""

__version__ = "0.1.0"
