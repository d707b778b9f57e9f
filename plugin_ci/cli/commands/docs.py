"""
Native Click implementation of the docs command.

Usage: plugin-ci docs
"""

import click

from ...services.stages import run_docs_stage
from ..context import PluginCIContext
from ._stage import finish


@click.command("docs")
@click.pass_obj
def docs(ctx: PluginCIContext) -> None:
    """Copy docs/ into ci/docs for packaging."""
    result = run_docs_stage(ctx.stage_context())
    if result.success and result.outputs.get("skipped"):
        click.echo("No docs folder, nothing to do.")
    finish(result)
