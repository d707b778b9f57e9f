"""
Native Click implementation of the config command.

Usage: plugin-ci config [list|get] [key]
"""

import click

from ...config import config_get, config_source, load_config
from ..context import PluginCIContext


@click.group("config", invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context) -> None:
    """View configuration.

    Config is read from .plugin-ci/config.toml or [tool.plugin-ci] in
    pyproject.toml, with PLUGIN_CI_<SECTION>__<FIELD> environment overrides.

    \b
    Examples:

        plugin-ci config list

        plugin-ci config get testing.base_url
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@config.command("list")
@click.pass_obj
def config_list_cmd(ctx: PluginCIContext) -> None:
    """List effective config values."""
    source = ctx.config_path or config_source(str(ctx.cwd))
    click.echo(f"Config file: {source or '(none)'}")
    click.echo("")
    for section, values in load_config(ctx.config_path, str(ctx.cwd)).items():
        if section.startswith("_"):
            continue
        click.echo(f"[{section}]")
        for key, value in values.items():
            click.echo(f"  {key} = {value!r}")
        click.echo("")


@config.command("get")
@click.argument("key")
@click.pass_obj
def config_get_cmd(ctx: PluginCIContext, key: str) -> None:
    """Get a config value.

    Arguments:

        KEY    The config key to get (e.g. packaging.min_package_size)
    """
    value = config_get(key, start_dir=str(ctx.cwd), config_path=ctx.config_path)
    if value is None:
        click.echo(f"{key}: (not set)")
    else:
        click.echo(f"{key}: {value}")
