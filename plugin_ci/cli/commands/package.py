"""
Native Click implementation of the package command.

Usage: plugin-ci package
"""

import click

from ...services.stages import run_package_stage
from ..context import PluginCIContext
from ._stage import finish


@click.command("package")
@click.pass_obj
def package(ctx: PluginCIContext) -> None:
    """Merge job dist folders, stamp plugin.json and build the zip.

    \b
    Outputs:
        ci/dist/                     merged distribution tree
        ci/packages/<id>-<ver>.zip   plugin archive (+ .md5)
        ci/packages/info.json        package descriptors
        ci/grafana-test-env/         unpacked plugin + custom.ini
    """
    result = run_package_stage(ctx.stage_context())
    if result.success:
        packages = result.outputs["packages"]
        for kind, descriptor in packages.descriptors().items():
            click.echo(f"  {kind}: {descriptor.name} ({descriptor.size} bytes, md5 {descriptor.checksum})")
    finish(result)
