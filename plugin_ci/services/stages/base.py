"""
Shared stage plumbing: context, result and the stats-recording wrapper.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any

from ...core.exceptions import BuildCommandError, JobFolderError, PluginCIException
from ...core.interfaces.logger import ILogger
from ...core.interfaces.vcs import IVCSProvider
from ...core.settings import PluginCISettings, load_settings
from ..ci_env import CIEnvironment
from ..jobs.folders import Job, JobFolderManager
from ..logging import get_logger


@dataclass
class StageResult:
    """Outcome of one stage invocation."""

    stage: str
    job: Job | None
    success: bool
    error: PluginCIException | None = None
    outputs: dict[str, Any] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        if self.success:
            return 0
        return self.error.exit_code if self.error else 1


@dataclass
class StageContext:
    """Everything a stage needs to know about where and how it runs."""

    settings: PluginCISettings
    project_dir: Path
    env: CIEnvironment
    logger: ILogger
    vcs: IVCSProvider | None = None

    @classmethod
    def create(
        cls,
        settings: PluginCISettings | None = None,
        project_dir: Path | None = None,
        env: CIEnvironment | None = None,
        vcs: IVCSProvider | None = None,
    ) -> StageContext:
        project_dir = (project_dir or Path.cwd()).resolve()
        return cls(
            settings=settings or load_settings(start_dir=str(project_dir)),
            project_dir=project_dir,
            env=env or CIEnvironment.from_env(),
            logger=get_logger(),
            vcs=vcs,
        )

    @cached_property
    def ci_root(self) -> Path:
        return self.settings.ci_root(self.project_dir)

    @cached_property
    def folders(self) -> JobFolderManager:
        return JobFolderManager(self.ci_root, self.logger)

    def job_name(self, default: str) -> str:
        """Configured job name, then the CI provider's, then the stage default."""
        return self.settings.ci.job or self.env.job_name or default


def run_stage(
    ctx: StageContext,
    stage: str,
    job_name: str,
    body: Callable[[Job], dict[str, Any] | None],
) -> StageResult:
    """
    Run ``body`` inside a fresh job folder and record the job's stats.

    Pipeline errors abort the stage and are returned in the result. Any
    other exception propagates after the stats are written.
    """
    try:
        job = ctx.folders.new_job_folder(job_name, stage=stage)
    except JobFolderError as e:
        ctx.logger.error("Stage %s could not start: %s", stage, e)
        return StageResult(stage=stage, job=None, success=False, error=e)

    error: BaseException | None = None
    try:
        outputs = body(job) or {}
        ctx.logger.info("Stage %s finished (job %s)", stage, job.job_id)
        return StageResult(stage=stage, job=job, success=True, outputs=outputs)
    except PluginCIException as e:
        error = e
        ctx.logger.error("Stage %s aborted: %s", stage, e)
        return StageResult(stage=stage, job=job, success=False, error=e)
    except BaseException as e:
        error = e
        raise
    finally:
        ctx.folders.record_stats(job, error=(str(error) or type(error).__name__) if error else None)


def run_command(
    command: list[str],
    cwd: Path,
    extra_env: Mapping[str, str] | None = None,
) -> None:
    """
    Run an external build command, inheriting stdout and stderr.

    Raises:
        BuildCommandError: If the command cannot start or exits non-zero
    """
    env = {**os.environ, **(extra_env or {})}
    try:
        proc = subprocess.run(command, cwd=cwd, env=env, check=False)
    except OSError as e:
        raise BuildCommandError("Could not start command", command=command, cause=e) from e
    if proc.returncode != 0:
        raise BuildCommandError(
            "Command failed", command=command, returncode=proc.returncode
        )


def recreate_dir(path: Path) -> Path:
    """
    Remove ``path`` if present and create it empty.

    Raises:
        JobFolderError: If the directory cannot be replaced
    """
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)
    except OSError as e:
        raise JobFolderError("Cannot recreate directory", path=str(path), cause=e) from e
    return path
