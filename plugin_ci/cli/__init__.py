"""
Click-based CLI for plugin-ci.

Usage:
    from plugin_ci.cli import cli
    cli()  # Invokes the CLI
"""

from __future__ import annotations

from pathlib import Path

import click

from .. import __version__
from .context import PluginCIContext


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="plugin-ci")
@click.option(
    "-C",
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Plugin project directory (default: current directory)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Explicit config file",
)
@click.pass_context
def cli(ctx: click.Context, project_dir: Path | None, config_path: Path | None) -> None:
    """plugin-ci - CI pipeline for plugin artifacts

    \b
    Stages (run in order, usually as separate CI jobs):
        plugin-ci build [--backend NAME]   Build into ci/jobs/<job>
        plugin-ci docs                     Stage docs into ci/docs
        plugin-ci package                  Merge, stamp and zip the plugin
        plugin-ci test                     End-to-end test the deployed build
        plugin-ci report [--upload]        Write the report and record history

    \b
    Configuration:
        plugin-ci config                   View configuration
    """
    ctx.ensure_object(dict)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)
    else:
        ctx.obj = PluginCIContext.create(cwd=project_dir, config_path=config_path)


def register_commands() -> None:
    """Register all CLI commands with the main group."""
    from .commands import COMMANDS

    for cmd in COMMANDS:
        cli.add_command(cmd)


register_commands()


__all__ = [
    "PluginCIContext",
    "cli",
    "register_commands",
]
