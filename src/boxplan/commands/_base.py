"""Click base classes carrying boxplan usage examples.

Each command declares ``examples`` as ``(arguments, note)`` pairs, the
arguments written as typed after ``boxplan``. ``--examples`` prints them
with the notes aligned and exits. On a group it also prints the examples
of every subcommand, so a group never repeats them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

PROG = "boxplan"

Example = tuple[str, str]


def format_examples(examples: Sequence[Example]) -> list[str]:
    """One ``boxplan <arguments>  # <note>`` line per example."""
    calls = [f"{PROG} {arguments}" for arguments, _note in examples]
    width = max((len(call) for call in calls), default=0)
    return [
        f"  {call.ljust(width)}  # {note}" if note else f"  {call}"
        for call, (_arguments, note) in zip(calls, examples, strict=True)
    ]


def _examples_of(cmd: click.Command | None) -> tuple[Example, ...]:
    return getattr(cmd, "examples", ())


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    cmd = ctx.command
    lines = [f"Examples for '{ctx.command_path}':", *format_examples(_examples_of(cmd))]
    if isinstance(cmd, click.Group):
        for name in cmd.list_commands(ctx):
            sub_examples = _examples_of(cmd.get_command(ctx, name))
            if sub_examples:
                lines += ["", f"{ctx.command_path} {name}:", *format_examples(sub_examples)]
    click.echo("\n".join(lines))
    ctx.exit(0)


def _examples_option() -> click.Option:
    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show_examples,
        help="Show usage examples.",
    )


class BoxCommand(click.Command):
    """A board command; ``--examples`` lists its ``(arguments, note)`` pairs."""

    def __init__(self, *args: Any, examples: Sequence[Example] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = tuple(examples)
        if self.examples:
            self.params.append(_examples_option())


class BoxGroup(click.Group):
    """A command group whose ``--examples`` also covers its subcommands."""

    command_class = BoxCommand

    def __init__(self, *args: Any, examples: Sequence[Example] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = tuple(examples)
        self.params.append(_examples_option())
