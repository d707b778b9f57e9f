"""
Collect per-job outputs from ``<ci>/jobs/*``.

Each job folder may hold ``job.json`` (stats), ``coverage/coverage-summary.json``
and ``results.json`` (end-to-end results). Missing or unreadable files are
logged and skipped; one broken job does not hide the others.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from ...core.interfaces.logger import ILogger
from ...core.models.job import JobStats
from ...core.models.report import CoverageDetails, TestResultsInfo, WorkflowInfo
from ..ci_env import CIEnvironment, now_ms
from ..jobs.folders import STATS_FILENAME
from ..logging import get_logger

COVERAGE_SUMMARY_PATH = Path("coverage") / "coverage-summary.json"
RESULTS_FILENAME = "results.json"


def _job_folders(jobs_dir: Path) -> list[Path]:
    if not jobs_dir.is_dir():
        return []
    return sorted(p for p in jobs_dir.iterdir() if p.is_dir())


def aggregate_workflow_info(
    jobs_dir: Path,
    env: CIEnvironment,
    job_name: str,
    logger: ILogger | None = None,
) -> WorkflowInfo:
    """
    Combine every job's stats into the workflow's timing.

    The workflow spans from the earliest job start to the latest job end;
    with no job stats it is a zero-length span at the current time.
    """
    log = logger or get_logger()
    now = now_ms()
    start_time = end_time = now
    jobs: list[JobStats] = []

    for folder in _job_folders(jobs_dir):
        path = folder / STATS_FILENAME
        if not path.is_file():
            log.warning("Missing job info: %s", path)
            continue
        try:
            stats = JobStats.model_validate_json(path.read_bytes())
        except (OSError, ValidationError) as e:
            log.warning("Unreadable job info %s: %s", path, e)
            continue
        jobs.append(stats)
        start_time = min(start_time, stats.start_time)
        end_time = max(end_time, stats.end_time)

    return WorkflowInfo(
        workflow_id=env.workflow_id,
        build_number=env.build_number,
        job_name=job_name,
        start_time=start_time,
        end_time=end_time,
        elapsed=end_time - start_time,
        jobs=jobs,
    )


def aggregate_coverage_info(jobs_dir: Path, logger: ILogger | None = None) -> list[CoverageDetails]:
    """Read the ``total`` block of every job's coverage summary."""
    log = logger or get_logger()
    found: list[CoverageDetails] = []
    for folder in _job_folders(jobs_dir):
        path = folder / COVERAGE_SUMMARY_PATH
        if not path.is_file():
            continue
        try:
            data = json.loads(path.read_text())
            found.append(CoverageDetails.model_validate({"job": folder.name, "summary": data.get("total", {})}))
        except (OSError, ValueError, AttributeError) as e:
            log.warning("Unreadable coverage summary %s: %s", path, e)
    return found


def aggregate_test_info(jobs_dir: Path, logger: ILogger | None = None) -> list[TestResultsInfo]:
    """Read every job's end-to-end ``results.json``."""
    log = logger or get_logger()
    found: list[TestResultsInfo] = []
    for folder in _job_folders(jobs_dir):
        path = folder / RESULTS_FILENAME
        if not path.is_file():
            continue
        try:
            found.append(TestResultsInfo.model_validate_json(path.read_bytes()))
        except (OSError, ValidationError) as e:
            log.warning("Unreadable test results %s: %s", path, e)
    return found
