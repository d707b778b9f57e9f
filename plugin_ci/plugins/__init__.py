"""
Built-in plugins for plugin-ci.

Subpackages are scanned by :func:`plugin_ci.core.registry.discover_plugins`:
- store: object store backends for build history
- vcs: version control providers for build metadata
"""
