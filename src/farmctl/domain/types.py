"""Favorite colors — the category that groups animals into barns."""

from __future__ import annotations

from enum import StrEnum


class Color(StrEnum):
    """Favorite color of an animal, and the color a barn is reserved for."""

    BLACK = "BLACK"
    BLUE = "BLUE"
    BROWN = "BROWN"
    GRAY = "GRAY"
    GREEN = "GREEN"
    ORANGE = "ORANGE"
    PINK = "PINK"
    PURPLE = "PURPLE"
    RED = "RED"
    WHITE = "WHITE"
    YELLOW = "YELLOW"


def parse_color(value: str) -> Color:
    """Resolve *value* to a :class:`Color`, case-insensitively.

    Raises:
        ValueError: If *value* names no known color.
    """
    try:
        return Color(value.strip().upper())
    except ValueError:
        msg = f"Unknown color: {value!r}. Expected one of {[c.value for c in Color]}"
        raise ValueError(msg) from None
