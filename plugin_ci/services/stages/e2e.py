"""
Test stage: end-to-end tests against the deployed build.

Failures while testing are captured in ``results.json``; the stage only
aborts when there is no packaged build to test.
"""

from __future__ import annotations

import shutil

from ...core.interfaces.testing import IDeployedInstance, IEndToEndRunner
from ..jobs.folders import Job
from ..packaging.manifest import MANIFEST_FILENAME, load_manifest
from ..report.aggregate import RESULTS_FILENAME
from ..testing import (
    DeployedInstanceClient,
    SubprocessEndToEndRunner,
    TestResultAggregator,
    find_images,
)
from .base import StageContext, StageResult, run_stage


def run_test_stage(
    ctx: StageContext,
    instance: IDeployedInstance | None = None,
    runner: IEndToEndRunner | None = None,
) -> StageResult:
    testing = ctx.settings.testing

    def body(job: Job) -> dict:
        manifest = load_manifest(ctx.ci_root / "dist" / MANIFEST_FILENAME)
        client = instance or DeployedInstanceClient(
            testing.base_url,
            testing.username,
            testing.password,
            testing.timeout,
            logger=ctx.logger,
        )
        e2e = runner or SubprocessEndToEndRunner(
            testing.command, testing.base_url, cwd=ctx.project_dir, logger=ctx.logger
        )
        output_dir = ctx.project_dir / testing.output_dir

        aggregator = TestResultAggregator(client, e2e, job.job_id, ctx.logger)
        results = aggregator.run_and_collect(manifest, output_dir)

        if output_dir.is_dir():
            try:
                shutil.copytree(output_dir, job.folder, dirs_exist_ok=True)
            except OSError as e:
                ctx.logger.warning("Could not copy %s into job folder: %s", output_dir, e)
        results.screenshots = find_images(job.folder)

        (job.folder / RESULTS_FILENAME).write_text(results.model_dump_json(indent=2))
        return {"results": results}

    return run_stage(ctx, "test", ctx.job_name("test"), body)
