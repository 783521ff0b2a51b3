"""Display consumers: error colouring and summary text.

These re-render an entity's displays whenever its errors or unit values
change. They only read properties; they never write them.
"""

from __future__ import annotations

from boxplan.domain.types import Prop
from boxplan.engine.store import Entity
from boxplan.rules.library import RuleContext


def error_color(ctx: RuleContext, entity: Entity) -> None:
    def paint() -> None:
        if entity.get(Prop.ERRORS, dict):
            entity.set_color(ctx.display.error_color)
        else:
            entity.set_color(ctx.display.clear_color)

    entity.subscribe(Prop.ERRORS, "error-color", paint)
    paint()


def render_text(entity: Entity) -> str:
    """Summarize units and active error messages, e.g. ``Units: 3, Errors: [..]``."""
    parts: list[str] = []
    total = entity.get(Prop.TOTAL_UNITS, lambda: None)
    if total is not None:
        parts.append(f"Units: {total}")
    own = entity.get(Prop.UNITS, lambda: None)
    if own is not None:
        parts.append(f"Units: {own}")
    errors: dict[str, str] = entity.get(Prop.ERRORS, dict)
    if errors:
        parts.append(f"Errors: [{', '.join(errors.values())}]")
    return ", ".join(parts)


def display_text(ctx: RuleContext, entity: Entity) -> None:
    def refresh() -> None:
        entity.set_text(render_text(entity))

    for prop in (Prop.ERRORS, Prop.TOTAL_UNITS, Prop.UNITS):
        entity.subscribe(prop, "display-text", refresh)
    refresh()
