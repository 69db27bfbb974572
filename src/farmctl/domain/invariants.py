"""Barn invariants — pure checks over a snapshot of animals and barns.

Used by ``farmctl verify`` and by tests to confirm that every color's
barns are sized, filled, and balanced the way a rebalance leaves them.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel

from farmctl.domain.models import Animal, Barn
from farmctl.domain.naming import needed_barns
from farmctl.domain.types import Color

IssueKind = Literal[
    "over_capacity",
    "empty_barn",
    "orphan_barn",
    "barn_count",
    "uneven",
    "unassigned",
    "color_mismatch",
]


class InvariantIssue(BaseModel):
    """One violated invariant."""

    model_config = {"frozen": True}

    kind: IssueKind
    color: Color
    message: str
    barn: str | None = None
    animal_id: int | None = None


def find_issues(animals: Iterable[Animal], barns: Iterable[Barn]) -> list[InvariantIssue]:
    """Check every color present in *animals* or *barns*.

    Returns an empty list when all invariants hold.
    """
    barns_by_id = {barn.id: barn for barn in barns}
    animals_by_color: dict[Color, list[Animal]] = defaultdict(list)
    barns_by_color: dict[Color, list[Barn]] = defaultdict(list)
    occupants: dict[int, int] = dict.fromkeys(barns_by_id, 0)

    for barn in barns_by_id.values():
        barns_by_color[barn.color].append(barn)

    issues: list[InvariantIssue] = []
    for animal in animals:
        animals_by_color[animal.favorite_color].append(animal)
        barn = barns_by_id.get(animal.barn_id) if animal.barn_id is not None else None
        if barn is None:
            issues.append(
                InvariantIssue(
                    kind="unassigned",
                    color=animal.favorite_color,
                    animal_id=animal.id,
                    message=f"Animal {animal.id} ({animal.name}) has no barn",
                )
            )
            continue
        occupants[barn.id] += 1
        if barn.color != animal.favorite_color:
            issues.append(
                InvariantIssue(
                    kind="color_mismatch",
                    color=animal.favorite_color,
                    barn=barn.name,
                    animal_id=animal.id,
                    message=(
                        f"Animal {animal.id} favors {animal.favorite_color.value} "
                        f"but lives in {barn.name}"
                    ),
                )
            )

    for color in sorted(set(animals_by_color) | set(barns_by_color)):
        issues.extend(
            _color_issues(color, len(animals_by_color[color]), barns_by_color[color], occupants)
        )
    return issues


def _color_issues(
    color: Color,
    animal_count: int,
    color_barns: list[Barn],
    occupants: dict[int, int],
) -> list[InvariantIssue]:
    issues: list[InvariantIssue] = []

    if animal_count == 0:
        for barn in color_barns:
            issues.append(
                InvariantIssue(
                    kind="orphan_barn",
                    color=color,
                    barn=barn.name,
                    message=f"{barn.name} exists but no {color.value} animals do",
                )
            )
        return issues

    for barn in color_barns:
        count = occupants[barn.id]
        if count == 0:
            issues.append(
                InvariantIssue(
                    kind="empty_barn", color=color, barn=barn.name, message=f"{barn.name} is empty"
                )
            )
        elif count > barn.capacity:
            issues.append(
                InvariantIssue(
                    kind="over_capacity",
                    color=color,
                    barn=barn.name,
                    message=f"{barn.name} holds {count} animals, capacity {barn.capacity}",
                )
            )

    if color_barns:
        capacity = min(barn.capacity for barn in color_barns)
        expected = needed_barns(animal_count, capacity)
        if len(color_barns) != expected:
            issues.append(
                InvariantIssue(
                    kind="barn_count",
                    color=color,
                    message=(
                        f"{color.value} has {len(color_barns)} barns for {animal_count} "
                        f"animals; expected {expected}"
                    ),
                )
            )
        counts = [occupants[barn.id] for barn in color_barns]
        if max(counts) - min(counts) > 1:
            issues.append(
                InvariantIssue(
                    kind="uneven",
                    color=color,
                    message=f"{color.value} barn counts range {min(counts)}..{max(counts)}",
                )
            )

    return issues
