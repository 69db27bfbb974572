"""Command group: add, remove, list, and generate animals."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from farmctl.commands._base import COLOR_CHOICE, FarmGroup

if TYPE_CHECKING:
    from farmctl.commands._context import AppContext

_ANIMAL_EXAMPLES = """\
  farmctl animal add Daisy --color red
  farmctl animal remove 12 15
  farmctl animal list --color blue
  farmctl animal populate 1000 --seed 7"""


@click.group(cls=FarmGroup, examples=_ANIMAL_EXAMPLES)
def animal() -> None:
    """Add and remove animals; barns follow automatically."""


@animal.command(
    examples="""\
  farmctl animal add Daisy --color red
  farmctl --json animal add Clover --color GREEN"""
)
@click.argument("name")
@click.option("--color", required=True, type=COLOR_CHOICE, help="Favorite color.")
@click.pass_obj
def add(app: AppContext, name: str, color: str) -> None:
    """Add an animal and rebalance the barns of its color."""
    from farmctl.services.farm import FarmService

    app.emit(FarmService(app.farm).add_animal(name, color))


@animal.command(
    examples="""\
  farmctl animal remove 12
  farmctl animal remove 12 15 18"""
)
@click.argument("animal_ids", nargs=-1, required=True, type=int)
@click.pass_obj
def remove(app: AppContext, animal_ids: tuple[int, ...]) -> None:
    """Remove animals by id and rebalance the barns of their colors."""
    from farmctl.services.farm import FarmService

    svc = FarmService(app.farm)
    if len(animal_ids) == 1:
        app.emit(svc.remove_animal(animal_ids[0]))
    else:
        app.emit(svc.remove_animals(animal_ids))


@animal.command(
    "list",
    examples="""\
  farmctl animal list
  farmctl animal list --color blue
  farmctl -q animal list""",
)
@click.option("--color", default=None, type=COLOR_CHOICE, help="Only this color.")
@click.pass_obj
def list_cmd(app: AppContext, color: str | None) -> None:
    """List animals and the barn each lives in."""
    from farmctl.services.farm import FarmService

    app.emit(FarmService(app.farm).list_animals(color))


@animal.command(
    examples="""\
  farmctl animal populate 100
  farmctl animal populate 1000 --seed 7"""
)
@click.argument("count", type=click.IntRange(min=1))
@click.option("--seed", default=None, type=int, help="Random seed for reproducible colors.")
@click.pass_obj
def populate(app: AppContext, count: int, seed: int | None) -> None:
    """Add COUNT animals with generated names and random colors."""
    from farmctl.services.farm import FarmService

    app.emit(FarmService(app.farm).populate(count, seed=seed))
