"""Command: persist a placement snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boxplan.commands._base import BoxCommand

if TYPE_CHECKING:
    from boxplan.commands._context import AppContext


@click.command(
    cls=BoxCommand,
    examples=[("save", "snapshot every placement"), ("--json save", "print the snapshot id")],
)
@click.pass_obj
def save(app: AppContext) -> None:
    """Save every entity's current rectangles."""
    from boxplan.services.board import BoardService

    app.emit(BoardService(app.board).save())
