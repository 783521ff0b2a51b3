"""Display boundary for rendering derived state on each region."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

NO_COLOR = "none"
ERROR_COLOR = "#F00000A0"


class Display(Protocol):
    """Visual consumer bound to one region of an entity."""

    def set_text(self, text: str) -> None: ...

    def set_color(self, color: str) -> None: ...


@dataclass
class RecordedDisplay:
    """Display that keeps the last text and colour it was given."""

    text: str = ""
    color: str = NO_COLOR

    def set_text(self, text: str) -> None:
        self.text = text

    def set_color(self, color: str) -> None:
        self.color = color
