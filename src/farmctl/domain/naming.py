"""Barn naming and sizing rules.

Barn names double as the ordering key when a color shrinks: the barns
kept are the lowest names. Indexes are zero-padded to 4 digits so that
lexical order matches numeric order, growing naturally past 9999.
"""

from __future__ import annotations

import random
from collections.abc import Collection

from farmctl.domain.types import Color


def barn_name(color: Color, index: int) -> str:
    """Name of the *index*-th barn of *color* (e.g. ``"Barn RED 0002"``)."""
    return f"Barn {color.value} {index:04d}"


def next_barn_names(
    color: Color,
    start: int,
    count: int,
    taken: Collection[str] = (),
) -> list[str]:
    """Return *count* distinct barn names, numbering up from *start*.

    Indexes whose name is already in *taken* are skipped.
    """
    names: list[str] = []
    index = start
    while len(names) < count:
        name = barn_name(color, index)
        if name not in taken:
            names.append(name)
        index += 1
    return names


def needed_barns(animal_count: int, capacity: int) -> int:
    """Minimum number of barns of *capacity* that hold *animal_count* animals.

    Examples:
        >>> needed_barns(25, 10)
        3
        >>> needed_barns(30, 10)
        3
        >>> needed_barns(0, 10)
        0
    """
    if capacity <= 0:
        msg = f"Barn capacity must be positive, got {capacity}"
        raise ValueError(msg)
    if animal_count < 0:
        msg = f"Animal count cannot be negative, got {animal_count}"
        raise ValueError(msg)

    barns = animal_count // capacity
    # Any remainder needs one more barn
    if animal_count % capacity != 0:
        barns += 1
    return barns


def animal_name(index: int) -> str:
    """Deterministic name for the *index*-th generated animal."""
    return f"Animal {index:04d}"


def random_color(rng: random.Random | None = None) -> Color:
    """Pick a favorite color uniformly at random."""
    return (rng or random).choice(list(Color))
