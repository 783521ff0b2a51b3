"""Rich Console factory and theme for boxplan output.

Consoles render to a StringIO buffer so renderers keep a plain
``-> str`` contract. Outside a terminal (tests, pipes) Rich drops colour
codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BOX_THEME = Theme(
    {
        "box.ok": "bold green",
        "box.error": "bold red",
        "box.warning": "bold yellow",
        "box.op": "bold cyan",
        "box.key": "dim",
        "box.id": "bold blue",
        "box.count": "magenta",
        "box.type.class": "green",
        "box.type.quarter": "cyan",
        "box.type.track": "yellow",
        "box.type.track-req": "yellow",
        "box.type.transfer": "blue",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=BOX_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(entity_type: str) -> str:
    """Rich style name for an entity type tag; empty for unknown tags."""
    style = f"box.type.{entity_type}"
    return style if style in BOX_THEME.styles else ""
