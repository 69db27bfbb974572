"""Rich Console factory and theme for farmctl output.

Consoles render to a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` function. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FARM_THEME = Theme(
    {
        "farm.ok": "bold green",
        "farm.error": "bold red",
        "farm.warning": "bold yellow",
        "farm.op": "bold cyan",
        "farm.key": "dim",
        "farm.id": "bold blue",
        "farm.barn": "bold",
        "farm.full": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=FARM_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
