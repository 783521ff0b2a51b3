"""Command: move one rectangle of an entity."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boxplan.commands._base import BoxCommand

if TYPE_CHECKING:
    from boxplan.commands._context import AppContext


@click.command(
    cls=BoxCommand,
    examples=[
        ('move "MATH 19" --left-top 210 40 --right-bottom 240 60', "into Winter 2022-23"),
        ('move "MATH 19" --index 1 --left-top 5 5 --right-bottom 20 20', "second rectangle"),
        ('move "CS 106A" --left-top 0 0 --right-bottom 10 10 --no-save', "try without saving"),
    ],
)
@click.argument("entity_id")
@click.option("--index", default=0, type=int, show_default=True, help="Which rectangle to move.")
@click.option(
    "--left-top",
    nargs=2,
    type=float,
    required=True,
    metavar="X Y",
    help="New top-left corner.",
)
@click.option(
    "--right-bottom",
    nargs=2,
    type=float,
    required=True,
    metavar="X Y",
    help="New bottom-right corner.",
)
@click.option("--no-save", is_flag=True, help="Do not persist a snapshot afterwards.")
@click.pass_obj
def move(
    app: AppContext,
    entity_id: str,
    index: int,
    left_top: tuple[float, float],
    right_bottom: tuple[float, float],
    no_save: bool,
) -> None:
    """Replace a rectangle and recalculate containment."""
    from boxplan.services.board import BoardService

    svc = BoardService(app.board)
    app.emit(svc.move(entity_id, index, left_top, right_bottom, save=not no_save))
