"""AppContext: shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Builds the Board lazily and routes results to
stdout/stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boxplan.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from boxplan.config.settings import BoxplanSettings
    from boxplan.infrastructure.board import Board
    from boxplan.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The board is created on first use so ``--help`` and ``--version``
    never touch the layout or the snapshot database.
    """

    def __init__(self, settings: BoxplanSettings) -> None:
        self.settings = settings
        self._board: Board | None = None

        from boxplan.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            trace_relations=settings.logging.trace_relations,
            sql_echo=settings.logging.sql_echo,
        )

        if settings.verbose:
            from boxplan.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def board(self) -> Board:
        """The board instance (created lazily, plugins loaded)."""
        if self._board is None:
            from boxplan.infrastructure.board import Board

            self._board = Board(self.settings)
            self._board.init_plugins()
        return self._board

    def close(self) -> None:
        if self._board is not None:
            self._board.close()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so piped
          output stays clean.
        * Failure: writes to stderr and exits with code 1.
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
