"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Farm initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from farmctl.config.logging import configure_logging
from farmctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from farmctl.config.settings import FarmSettings
    from farmctl.infrastructure.farm import Farm
    from farmctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The farm is opened on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: FarmSettings) -> None:
        self.settings = settings
        self._farm: Farm | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def farm(self) -> Farm:
        """The farm instance (created lazily on first access)."""
        if self._farm is None:
            from farmctl.infrastructure.farm import Farm

            self._farm = Farm(self.settings)
        return self._farm

    def close(self) -> None:
        if self._farm is not None:
            self._farm.close()
            self._farm = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
