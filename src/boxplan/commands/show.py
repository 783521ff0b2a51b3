"""Command: inspect one entity."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boxplan.commands._base import BoxCommand

if TYPE_CHECKING:
    from boxplan.commands._context import AppContext


@click.command(
    cls=BoxCommand,
    examples=[
        ('show "MATH 19"', "relations, units and errors"),
        ('--json show "Fall 2022-23"', "the same as JSON"),
    ],
)
@click.argument("entity_id")
@click.pass_obj
def show(app: AppContext, entity_id: str) -> None:
    """Show an entity's rectangles, relations, units and errors."""
    from boxplan.services.board import BoardService

    app.emit(BoardService(app.board).show(entity_id))
