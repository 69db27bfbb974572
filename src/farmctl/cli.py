"""farmctl entry point.

Global flags are collected into :class:`FarmSettings` once; subcommands
reach the farm through the :class:`AppContext` left on ``ctx.obj``.
"""

from __future__ import annotations

from pathlib import Path

import click

from farmctl import __version__
from farmctl.commands import register_commands
from farmctl.commands._context import AppContext
from farmctl.config.settings import FarmSettings

_EPILOG = (
    "Barns are never edited directly: adding or removing animals resizes the "
    "barns of their color. Run 'farmctl verify' to check every barn."
)


@click.group(invoke_without_command=True, epilog=_EPILOG)
@click.version_option(version=__version__, prog_name="farmctl")
@click.option(
    "--root",
    "farm_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Farm directory (default: where farmctl.toml is found, else CWD).",
)
@click.option("-c", "--config", "config_path", default=None, help="Config file to use.")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids or a one-line status only.")
@click.option("-v", "--verbose", is_flag=True, help="Show rebalance details and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.pass_context
def cli(
    ctx: click.Context,
    farm_root: Path | None,
    config_path: str | None,
    **flags: bool,
) -> None:
    """farmctl — keep every animal in a barn of its favorite color."""
    settings = FarmSettings.from_cli(config_path=config_path, farm_root=farm_root, **flags)
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
