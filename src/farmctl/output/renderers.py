"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from farmctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from farmctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if "id" in item)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="farm.ok"), Text(f"  {result.op}", style="farm.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    console.print(Text(f"  {key}: ", style="farm.key"), Text(str(value)))


def _rebalance_table(reports: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Color")
    table.add_column("Animals", justify="right")
    table.add_column("Barns", justify="right")
    table.add_column("Created", justify="right")
    table.add_column("Deleted", justify="right")
    table.add_column("Occupancy")
    for report in reports:
        occupancy = report.get("occupancy") or {}
        table.add_row(
            str(report.get("color", "")),
            str(report.get("animals", 0)),
            str(report.get("barns", 0)),
            str(len(report.get("created", []))),
            str(len(report.get("deleted", []))),
            " ".join(str(n) for n in occupancy.values()),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="farm.error")
    op = Text(f"  {result.op}", style="farm.op")
    console.print(label, op, " — ", msg)

    for issue in result.data.get("issues", []):
        kind = issue.get("kind", "?")
        console.print(f"  [farm.warning]{kind}[/farm.warning]: {issue.get('message', '')}")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_add(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    animal = result.data.get("animal", {})
    _field(console, "id", animal.get("id", ""))
    _field(console, "name", animal.get("name", ""))
    _field(console, "color", animal.get("favorite_color", ""))
    _field(console, "barn_id", animal.get("barn_id", ""))
    if verbose and result.data.get("rebalance"):
        console.print(_rebalance_table([result.data["rebalance"]]))


def _render_remove(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    removed = result.data.get("removed", [])
    if isinstance(removed, dict):
        removed = [removed]
    _field(console, "removed", len(removed))
    reports = result.data.get("rebalanced") or [result.data.get("rebalance", {})]
    if verbose:
        console.print(_rebalance_table(reports))


def _render_batch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    added = result.data.get("added", [])
    _field(console, "added", added if isinstance(added, int) else len(added))
    if result.data.get("by_color"):
        _field(console, "by_color", result.data["by_color"])
    for err in result.data.get("errors", []):
        skipped = "[farm.warning]skipped[/farm.warning]"
        console.print(f"  {skipped} item {err['index']}: {err['error']}")
    if verbose:
        console.print(_rebalance_table(result.data.get("rebalanced", [])))


def _render_rebalance(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    reports = result.data.get("rebalanced", [])
    if not reports:
        console.print("  Nothing to rebalance.")
        return
    console.print(_rebalance_table(reports))


# ── Listing renderers ─────────────────────────────────────────────────


def _render_animals(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No animals.")
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="farm.id", no_wrap=True, justify="right")
    table.add_column("Name")
    table.add_column("Color")
    table.add_column("Barn", style="farm.barn")
    for item in items:
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("favorite_color", "")),
            str(item.get("barn") or "-"),
        )
    console.print(table)
    console.print(f"{result.data.get('count', len(items))} animals")


def _render_barns(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No barns.")
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="farm.id", no_wrap=True, justify="right")
    table.add_column("Name", style="farm.barn")
    table.add_column("Color")
    table.add_column("Occupants", justify="right")
    table.add_column("Capacity", justify="right")
    for item in items:
        occupants = int(item.get("occupants", 0))
        capacity = int(item.get("capacity", 0))
        style = "farm.full" if occupants == capacity else ""
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("color", "")),
            Text(str(occupants), style=style),
            str(capacity),
        )
    console.print(table)
    console.print(f"{result.data.get('count', len(items))} barns")


def _render_verify(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(
        f"[farm.ok]OK[/farm.ok]  {result.data.get('animals', 0)} animals in "
        f"{result.data.get('barns', 0)} barns, all invariants hold."
    )


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "add_animal": _render_add,
    "add_animals": _render_batch,
    "populate": _render_batch,
    "remove_animal": _render_remove,
    "remove_animals": _render_remove,
    "rebalance": _render_rebalance,
    "list_animals": _render_animals,
    "list_barns": _render_barns,
    "verify": _render_verify,
    "reset": _render_generic,
}
