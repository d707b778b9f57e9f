"""
Pydantic domain models for plugin-ci.

Records are validated at construction and when parsed back from the
object store, so corrupt stored data is rejected instead of propagated.
"""

from .base import ImmutableModel, PluginCIBaseModel
from .config import (
    BuildConfig,
    CIConfig,
    LoggingConfig,
    PackagingConfig,
    StoreConfig,
    TestingConfig,
)
from .history import (
    PR_INDEX_KEY,
    HistoryEntry,
    IndexEntry,
    IndexScope,
    PluginHistory,
    PluginIndex,
)
from .job import JobStats, JobStatus
from .manifest import PluginBuildInfo, PluginInfo, PluginManifest, PluginType
from .package import PackageDescriptor, PluginPackages
from .report import (
    BuildReport,
    CapturedError,
    CoverageDetails,
    CoverageMetric,
    TestResultsInfo,
    WorkflowInfo,
)

__all__ = [
    "PR_INDEX_KEY",
    "BuildConfig",
    "BuildReport",
    "CIConfig",
    "CapturedError",
    "CoverageDetails",
    "CoverageMetric",
    "HistoryEntry",
    "ImmutableModel",
    "IndexEntry",
    "IndexScope",
    "JobStats",
    "JobStatus",
    "LoggingConfig",
    "PackageDescriptor",
    "PackagingConfig",
    "PluginBuildInfo",
    "PluginCIBaseModel",
    "PluginHistory",
    "PluginIndex",
    "PluginInfo",
    "PluginManifest",
    "PluginPackages",
    "PluginType",
    "StoreConfig",
    "TestResultsInfo",
    "TestingConfig",
    "WorkflowInfo",
]
