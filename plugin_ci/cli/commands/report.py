"""
Native Click implementation of the report command.

Usage: plugin-ci report [--upload]
"""

import click

from ...services.stages import run_report_stage
from ..context import PluginCIContext
from ._stage import finish


@click.command("report")
@click.option("--upload", is_flag=True, help="Upload package archives (branch builds only)")
@click.pass_obj
def report(ctx: PluginCIContext, upload: bool) -> None:
    """Write ci/report.json and record the build in the history store."""
    result = run_report_stage(ctx.stage_context(), upload=upload)
    if result.success:
        recorded = result.outputs["record"]
        click.echo(f"  registered: {recorded.key.report_key}")
        for key in recorded.uploaded:
            click.echo(f"  uploaded: {key}")
    finish(result)
