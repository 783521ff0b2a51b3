"""Command group: containment graph views."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boxplan.commands._base import BoxGroup
from boxplan.services.graph import GraphService

if TYPE_CHECKING:
    from boxplan.commands._context import AppContext


@click.group(cls=BoxGroup)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Inspect the containment graph."""


@graph.command(
    examples=[
        ("graph tree", "every top-level entity"),
        ('graph tree "Fall 2022-23"', "one subtree"),
        ("--json graph tree", "nested JSON"),
    ]
)
@click.argument("root", required=False)
@click.pass_obj
def tree(app: AppContext, root: str | None) -> None:
    """Show the containment hierarchy."""
    app.emit(GraphService(app.board).tree(root))


@graph.command(examples=[("graph verify", "parents and children agree")])
@click.pass_obj
def verify(app: AppContext) -> None:
    """Check that parents and children agree everywhere."""
    app.emit(GraphService(app.board).verify())
