"""
Native Click implementation of the build command.

Usage: plugin-ci build [--backend NAME]
"""

import click

from ...services.stages import run_build_stage
from ..context import PluginCIContext
from ._stage import finish


@click.command("build")
@click.option("--backend", default=None, help="Build the backend for this platform instead")
@click.pass_obj
def build(ctx: PluginCIContext, backend: str | None) -> None:
    """Build the plugin into its own job folder.

    The project's dist/ and coverage/ folders are moved into
    ci/jobs/<job>/ after the build command succeeds.

    \b
    Examples:
        plugin-ci build
        plugin-ci build --backend linux_amd64
    """
    finish(run_build_stage(ctx.stage_context(), backend=backend))
