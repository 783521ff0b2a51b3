"""Subcommand modules for boxplan.

register_commands() uses deferred imports to keep ``boxplan --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the graph group and the standalone board commands."""
    from boxplan.commands.graph import graph

    cli.add_command(graph)

    from boxplan.commands.check import check
    from boxplan.commands.move import move
    from boxplan.commands.save import save
    from boxplan.commands.show import show

    cli.add_command(check)
    cli.add_command(show)
    cli.add_command(move)
    cli.add_command(save)
