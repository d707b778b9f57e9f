"""
Docs stage: stage ``<project>/docs`` as ``<ci>/docs`` for packaging.
"""

from __future__ import annotations

import shutil

from ..jobs.folders import Job
from .base import StageContext, StageResult, recreate_dir, run_stage

INDEX_PLACEHOLDER = "<html><body><p>Documentation has not been built.</p></body></html>\n"


def run_docs_stage(ctx: StageContext) -> StageResult:
    def body(job: Job) -> dict:
        source = ctx.project_dir / "docs"
        if not source.is_dir():
            ctx.logger.info("No docs at %s", source)
            return {"skipped": True}

        dest = recreate_dir(ctx.ci_root / "docs")
        shutil.copytree(source, dest, dirs_exist_ok=True)
        index = dest / "index.html"
        if not index.exists():
            index.write_text(INDEX_PLACEHOLDER)
        return {"skipped": False, "docs_dir": dest}

    return run_stage(ctx, "docs", ctx.job_name("docs"), body)
