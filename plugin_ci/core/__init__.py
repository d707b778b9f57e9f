"""
Core infrastructure for plugin-ci.

This module provides:
- ServiceContainer: DI container using dependency-injector
- Plugin registry with auto-discovery
- Application bootstrap for initialization
- Interface definitions for pluggable collaborators
- Custom exception hierarchy
"""

from .bootstrap import bootstrap, is_initialized, reset
from .container import ServiceContainer, get_container, resolve, try_resolve
from .exceptions import (
    BuildCommandError,
    CollisionError,
    ConfigFileError,
    CorruptObjectError,
    DeploymentUnreachableError,
    DuplicateJobError,
    EndToEndRunnerError,
    JobFolderError,
    ManifestError,
    PackageTooSmallError,
    PackagingError,
    PluginCIException,
    ReportError,
    StoreError,
    VersionMismatchError,
)
from .registry import discover_plugins

__all__ = [
    "BuildCommandError",
    "CollisionError",
    "ConfigFileError",
    "CorruptObjectError",
    "DeploymentUnreachableError",
    "DuplicateJobError",
    "EndToEndRunnerError",
    "JobFolderError",
    "ManifestError",
    "PackageTooSmallError",
    "PackagingError",
    "PluginCIException",
    "ReportError",
    "ServiceContainer",
    "StoreError",
    "VersionMismatchError",
    "bootstrap",
    "discover_plugins",
    "get_container",
    "is_initialized",
    "reset",
    "resolve",
    "try_resolve",
]
