"""
Package stage.

Merges every job's ``dist/`` into ``<ci>/dist``, stamps the manifest with
build info, zips the plugin (and docs, when present) into
``<ci>/packages`` and prepares ``<ci>/grafana-test-env`` with the
unpacked plugin for the test stage.
"""

from __future__ import annotations

import json
from pathlib import Path

from ...core.models.package import PluginPackages
from ..ci_env import get_plugin_build_info
from ..jobs.folders import Job
from ..packaging import ArtifactMerger, PackageAssembler
from .base import StageContext, StageResult, recreate_dir, run_stage

PACKAGE_INFO_FILENAME = "info.json"


def write_custom_ini(env_dir: Path) -> Path:
    """Point the test instance's plugin path at ``<env_dir>/plugins``."""
    path = env_dir / "custom.ini"
    path.write_text(
        "# Autogenerated by plugin-ci\n"
        "[paths]\n"
        f"plugins = {(env_dir / 'plugins').resolve()}\n"
        "\n"
    )
    return path


def run_package_stage(
    ctx: StageContext,
    assembler: PackageAssembler | None = None,
    merger: ArtifactMerger | None = None,
) -> StageResult:
    assembler = assembler or PackageAssembler(ctx.settings.packaging, logger=ctx.logger)
    merger = merger or ArtifactMerger(ctx.logger)

    def body(job: Job) -> dict:
        ci = ctx.ci_root
        packages_dir = recreate_dir(ci / "packages")
        dist_dir = recreate_dir(ci / "dist")
        env_dir = recreate_dir(ci / "grafana-test-env")

        merger.merge_dist_trees(
            dist_dir,
            ctx.project_dir / "dist",
            ctx.folders.job_subtrees("dist"),
        )

        build_info = get_plugin_build_info(ctx.env, ctx.vcs, str(ctx.project_dir))
        manifest = assembler.stamp_manifest(dist_dir, build_info)
        basename = manifest.package_basename()

        plugin = assembler.build_archive(dist_dir, packages_dir / f"{basename}.zip")
        assembler.extract(packages_dir / plugin.name, env_dir / "plugins" / manifest.id)
        docs = assembler.build_docs_archive(ci / "docs", packages_dir / f"{basename}-docs.zip")

        packages = PluginPackages(plugin=plugin, docs=docs)
        (packages_dir / PACKAGE_INFO_FILENAME).write_text(
            json.dumps(packages.model_dump(mode="json", exclude_none=True), indent=2)
        )
        write_custom_ini(env_dir)
        return {"manifest": manifest, "packages": packages}

    return run_stage(ctx, "package", ctx.job_name("package"), body)
