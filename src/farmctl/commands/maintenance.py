"""Commands: rebalance, verify, reset."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from farmctl.commands._base import COLOR_CHOICE, FarmCommand

if TYPE_CHECKING:
    from farmctl.commands._context import AppContext


@click.command(
    cls=FarmCommand,
    examples="""\
  farmctl rebalance
  farmctl rebalance --color red""",
)
@click.option("--color", default=None, type=COLOR_CHOICE, help="Only this color.")
@click.pass_obj
def rebalance(app: AppContext, color: str | None) -> None:
    """Recompute barns for one color, or for all colors."""
    from farmctl.services.farm import FarmService

    app.emit(FarmService(app.farm).rebalance(color))


@click.command(
    cls=FarmCommand,
    examples="""\
  farmctl verify
  farmctl --json verify""",
)
@click.pass_obj
def verify(app: AppContext) -> None:
    """Check that every barn is within capacity, non-empty, and balanced."""
    from farmctl.services.farm import FarmService

    app.emit(FarmService(app.farm).verify())


@click.command(cls=FarmCommand, examples="  farmctl reset --yes")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def reset(app: AppContext, yes: bool) -> None:
    """Delete every animal and barn."""
    if not yes:
        click.confirm("Remove all animals and barns?", abort=True)

    from farmctl.services.farm import FarmService

    app.emit(FarmService(app.farm).reset())
