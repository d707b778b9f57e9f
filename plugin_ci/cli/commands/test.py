"""
Native Click implementation of the test command.

Usage: plugin-ci test
"""

import click

from ...services.stages import run_test_stage
from ..context import PluginCIContext
from ._stage import finish


@click.command("test")
@click.pass_obj
def test(ctx: PluginCIContext) -> None:
    """Run end-to-end tests against the deployed build.

    Test failures are recorded in ci/jobs/<job>/results.json; the command
    only fails when there is no packaged build to test.
    """
    result = run_test_stage(ctx.stage_context())
    if result.success:
        results = result.outputs["results"]
        click.echo(f"  passed: {results.passed}  failed: {results.failed}")
        if results.error:
            click.echo(f"  error: {results.error.type}: {results.error.message}")
    finish(result)
