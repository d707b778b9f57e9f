"""
Report stage.

Builds ``<ci>/report.json`` from the packaged build and every job's
outputs, then records it in the history store.
"""

from __future__ import annotations

from ...core.exceptions import ReportError
from ...core.interfaces.store import IObjectStore
from ..history import HistoryStore, create_object_store
from ..jobs.folders import Job
from ..packaging.manifest import MANIFEST_FILENAME, load_manifest
from ..report import (
    REPORT_FILENAME,
    ReportBuilder,
    aggregate_coverage_info,
    aggregate_test_info,
    aggregate_workflow_info,
    load_packages,
    write_report,
)
from .base import StageContext, StageResult, run_stage
from .package import PACKAGE_INFO_FILENAME

UNKNOWN_BRANCH = "unknown"


def run_report_stage(
    ctx: StageContext,
    upload: bool = False,
    store: IObjectStore | None = None,
) -> StageResult:
    def body(job: Job) -> dict:
        ci = ctx.ci_root
        packages = load_packages(ci / "packages" / PACKAGE_INFO_FILENAME)
        manifest = load_manifest(ci / "dist" / MANIFEST_FILENAME)
        jobs_dir = ctx.folders.jobs_dir

        report = ReportBuilder(ctx.logger).build_report(
            manifest,
            packages,
            aggregate_workflow_info(jobs_dir, ctx.env, job.job_id, ctx.logger),
            aggregate_coverage_info(jobs_dir, ctx.logger),
            aggregate_test_info(jobs_dir, ctx.logger),
            pull_request=ctx.env.pull_request,
        )
        write_report(ci / REPORT_FILENAME, report)

        build = manifest.build
        if build is None:
            raise ReportError("Manifest is missing build info", context={"plugin": manifest.id})

        history = HistoryStore(
            store or create_object_store(ctx.settings.store, ci),
            root=ctx.settings.store.root,
            logger=ctx.logger,
        )
        recorded = history.record(
            report,
            branch=build.branch or UNKNOWN_BRANCH,
            build_number=ctx.env.build_number or build.build,
        )
        if upload and not recorded.key.is_pull_request:
            recorded.uploaded = history.upload_packages(
                recorded.key, ci / "packages", packages.descriptors()
            )
        return {"report": report, "record": recorded}

    return run_stage(ctx, "report", ctx.job_name("report"), body)
