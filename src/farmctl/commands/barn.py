"""Command group: inspect barns."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from farmctl.commands._base import COLOR_CHOICE, FarmGroup

if TYPE_CHECKING:
    from farmctl.commands._context import AppContext


@click.group(
    cls=FarmGroup,
    examples="""\
  farmctl barn list
  farmctl barn list --color red""",
)
def barn() -> None:
    """Inspect barns. Barns are created and removed by rebalancing only."""


@barn.command("list")
@click.option("--color", default=None, type=COLOR_CHOICE, help="Only this color.")
@click.pass_obj
def list_cmd(app: AppContext, color: str | None) -> None:
    """List barns with their occupancy and capacity."""
    from farmctl.services.farm import FarmService

    app.emit(FarmService(app.farm).list_barns(color))
