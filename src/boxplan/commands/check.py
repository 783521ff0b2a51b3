"""Command: evaluate every rule on the board."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boxplan.commands._base import BoxCommand

if TYPE_CHECKING:
    from boxplan.commands._context import AppContext


@click.command(
    cls=BoxCommand,
    examples=[
        ("check", "every entity with its summary text"),
        ("check --errors-only", "only entities with active errors"),
        ("--json check", "machine-readable result"),
        ("-l plans/alt.toml check", "evaluate another layout"),
    ],
)
@click.option("--errors-only", is_flag=True, help="List only entities with active errors.")
@click.pass_obj
def check(app: AppContext, errors_only: bool) -> None:
    """Load the layout and report active rule errors."""
    from boxplan.services.board import BoardService

    app.emit(BoardService(app.board).check(errors_only=errors_only))
