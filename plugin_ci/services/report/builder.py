"""
Build report assembly.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ...core.exceptions import ReportError
from ...core.interfaces.logger import ILogger
from ...core.models.manifest import PluginManifest
from ...core.models.package import PluginPackages
from ...core.models.report import BuildReport, CoverageDetails, TestResultsInfo, WorkflowInfo
from ..logging import get_logger

REPORT_FILENAME = "report.json"


class ReportBuilder:
    """Combines stage outputs into a single immutable BuildReport."""

    def __init__(self, logger: ILogger | None = None):
        self._logger = logger or get_logger()

    def build_report(
        self,
        manifest: PluginManifest,
        packages: PluginPackages | Mapping[str, Any],
        workflow: WorkflowInfo,
        coverage: list[CoverageDetails] | None = None,
        tests: list[TestResultsInfo] | None = None,
        pull_request: int | None = None,
    ) -> BuildReport:
        """
        Assemble the report for one build.

        Args:
            manifest: The stamped plugin manifest
            packages: ``packages/info.json`` contents; must include ``plugin``
            workflow: Aggregated workflow timing
            coverage: Per-job coverage summaries
            tests: Per-job end-to-end results
            pull_request: PR number, only for pull request runs

        Raises:
            ReportError: If there is no plugin package
        """
        if not isinstance(packages, PluginPackages):
            if not packages or packages.get("plugin") is None:
                raise ReportError("Missing plugin package, run the package stage first")
            try:
                packages = PluginPackages.model_validate(dict(packages))
            except ValidationError as e:
                raise ReportError("Invalid package info", cause=e) from e

        report = BuildReport(
            plugin=manifest,
            packages=packages,
            workflow=workflow,
            coverage=list(coverage or []),
            tests=list(tests or []),
            pull_request=pull_request,
        )
        self._logger.info(
            "Built report for %s %s (%d test jobs)",
            manifest.id,
            manifest.version,
            len(report.tests),
        )
        return report


def load_packages(path: Path) -> PluginPackages:
    """
    Read ``packages/info.json``.

    Raises:
        ReportError: If the file is missing or has no plugin package
    """
    if not path.is_file():
        raise ReportError("Missing package info, run the package stage first", context={"path": str(path)})
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        raise ReportError("Unreadable package info", context={"path": str(path)}, cause=e) from e
    if not isinstance(data, dict) or data.get("plugin") is None:
        raise ReportError("Missing plugin package, run the package stage first", context={"path": str(path)})
    try:
        return PluginPackages.model_validate(data)
    except ValidationError as e:
        raise ReportError("Invalid package info", context={"path": str(path)}, cause=e) from e


def write_report(path: Path, report: BuildReport) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_json_dict(), indent=2))
