"""
Job folder management.

Every stage invocation owns one folder under ``<ci>/jobs/<job-id>/``. The
folder is destroyed and recreated when the stage starts, receives the
stage's ``dist/``, ``coverage/`` and result files, and ends with a
``job.json`` stats record.
"""

from __future__ import annotations

import json
import re
import shutil
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ...core.exceptions import JobFolderError
from ...core.interfaces.logger import ILogger
from ...core.models.job import JobStats
from ..ci_env import now_ms
from ..logging import get_logger

STATS_FILENAME = "job.json"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_job_name(name: str) -> str:
    """
    Make a CI job name safe to use as a single directory name.

    Raises:
        JobFolderError: If nothing usable is left of the name
    """
    cleaned = _UNSAFE_CHARS.sub("_", name.strip()).strip("._")
    if not cleaned:
        raise JobFolderError(
            "Job name has no usable characters", context={"job_name": name}
        )
    return cleaned


@dataclass(frozen=True)
class Job:
    """One stage invocation: its id, start time (ms) and folder."""

    job_id: str
    start_time: int
    folder: Path
    stage: str | None = None


class JobFolderManager:
    """Allocates job folders under the CI root and records their stats."""

    def __init__(self, ci_root: Path, logger: ILogger | None = None):
        self.ci_root = Path(ci_root)
        self._logger = logger or get_logger()

    @property
    def jobs_dir(self) -> Path:
        return self.ci_root / "jobs"

    def new_job_folder(self, job_name: str, stage: str | None = None) -> Job:
        """
        Create a fresh, empty folder for this job.

        Any folder left by a previous run of the same job is removed first.

        Raises:
            JobFolderError: If the CI root is not writable
        """
        job_id = sanitize_job_name(job_name)
        folder = self.jobs_dir / job_id
        try:
            if folder.exists():
                shutil.rmtree(folder)
            folder.mkdir(parents=True)
        except OSError as e:
            raise JobFolderError(
                "Cannot create job folder", path=str(folder), cause=e
            ) from e
        self._logger.debug("Created job folder %s", folder)
        return Job(job_id=job_id, start_time=now_ms(), folder=folder, stage=stage)

    def record_stats(self, job: Job, error: str | None = None) -> JobStats | None:
        """
        Write ``job.json`` with elapsed time and exit status.

        Best effort: failures are logged and None is returned.
        """
        try:
            stats = JobStats.create(
                job.job_id,
                job.start_time,
                now_ms(),
                stage=job.stage,
                error=error,
            )
            path = job.folder / STATS_FILENAME
            path.write_text(json.dumps(stats.model_dump(mode="json"), indent=2))
        except Exception as e:
            self._logger.warning("Failed to record stats for job %s: %s", job.job_id, e)
            return None
        return stats

    def iter_job_folders(self) -> Iterator[Path]:
        """Yield existing job folders in name order."""
        if not self.jobs_dir.is_dir():
            return
        for path in sorted(self.jobs_dir.iterdir()):
            if path.is_dir():
                yield path

    def job_subtrees(self, name: str) -> list[Path]:
        """Return ``<job>/<name>`` for every job folder that has one."""
        return [p / name for p in self.iter_job_folders() if (p / name).is_dir()]
