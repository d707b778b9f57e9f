"""
Build stage.

Runs the frontend build (or, with a backend platform, the backend build)
and moves the project's ``dist/`` and ``coverage/`` into the job folder so
that parallel builds never share output directories.
"""

from __future__ import annotations

import shutil

from ...core.exceptions import BuildCommandError
from ..jobs.folders import Job
from .base import StageContext, StageResult, run_command, run_stage

MOVED_FOLDERS = ("dist", "coverage")


def run_build_stage(ctx: StageContext, backend: str | None = None) -> StageResult:
    default_name = f"build_{backend}" if backend else "build_plugin"

    def body(job: Job) -> dict:
        build = ctx.settings.build
        if backend:
            if not build.backend_command:
                raise BuildCommandError(
                    "No backend build command configured", context={"backend": backend}
                )
            command = build.backend_command
            extra_env = {"BUILD_PLATFORM": backend}
        else:
            command = build.command
            extra_env = {}

        if command:
            ctx.logger.info("Running build: %s", " ".join(command))
            run_command(command, ctx.project_dir, extra_env)

        moved = []
        for name in MOVED_FOLDERS:
            source = ctx.project_dir / name
            if source.is_dir():
                shutil.move(str(source), str(job.folder / name))
                moved.append(name)
        return {"moved": moved}

    return run_stage(ctx, "build", ctx.job_name(default_name), body)
