"""Tests for display consumers: error colour and summary text."""

from __future__ import annotations

from collections.abc import Callable

from boxplan.domain.display import ERROR_COLOR, NO_COLOR, RecordedDisplay
from boxplan.domain.types import Prop
from boxplan.engine.store import Entity
from boxplan.rules import display, library
from boxplan.rules.library import RuleContext


def _with_display(entity: Entity) -> RecordedDisplay:
    recorded = RecordedDisplay()
    entity.displays = [recorded]
    return recorded


class TestErrorColor:
    def test_colour_follows_errors(self, rules: RuleContext, add: Callable[..., Entity]) -> None:
        quarter = add("Q", "quarter")
        recorded = _with_display(quarter)
        display.error_color(rules, quarter)
        assert recorded.color == NO_COLOR

        quarter.set_error("units-max", ">22 units")
        assert recorded.color == ERROR_COLOR
        quarter.clear_error("units-max")
        assert recorded.color == NO_COLOR


class TestDisplayText:
    def test_render_text_parts(self) -> None:
        entity = Entity("Q", "quarter")
        assert display.render_text(entity) == ""
        entity.assign(Prop.TOTAL_UNITS, 6)
        entity.set_error("units-max", ">5 units")
        assert display.render_text(entity) == "Units: 6, Errors: [>5 units]"

    def test_own_units(self) -> None:
        entity = Entity("MATH 19", "class")
        entity.assign(Prop.UNITS, 3)
        assert display.render_text(entity) == "Units: 3"

    def test_text_refreshes_on_unit_changes(
        self, rules: RuleContext, add: Callable[..., Entity]
    ) -> None:
        quarter = add("Q", "quarter")
        recorded = _with_display(quarter)
        library.unit_max(rules, quarter, 5)
        display.display_text(rules, quarter)
        quarter.assign(Prop.TOTAL_UNITS, 7)
        assert recorded.text == "Units: 7, Errors: [>5 units]"
        quarter.assign(Prop.TOTAL_UNITS, 4)
        assert recorded.text == "Units: 4"
