"""Subcommand modules for farmctl.

Provides register_commands() which uses deferred imports to keep
``farmctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from farmctl.commands.animal import animal
    from farmctl.commands.barn import barn

    cli.add_command(animal)
    cli.add_command(barn)

    # --- Standalone commands ---
    from farmctl.commands.maintenance import rebalance, reset, verify

    cli.add_command(rebalance)
    cli.add_command(verify)
    cli.add_command(reset)
