"""Tests for the rule library: planning scenarios and individual rules."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from boxplan.config.models import ScheduleConfig
from boxplan.domain.geometry import Region
from boxplan.domain.types import Prop
from boxplan.engine.store import Entity, EntityRegistry
from boxplan.rules import library
from boxplan.rules.library import RuleContext


def _rect(left: float, top: float, right: float, bottom: float) -> Region:
    return Region(left_top=(left, top), right_bottom=(right, bottom))


_FALL = _rect(0, 0, 100, 100)
_WINTER = _rect(200, 0, 300, 100)
_IN_FALL = _rect(10, 10, 20, 20)
_IN_WINTER = _rect(210, 10, 220, 20)
_NOWHERE = _rect(900, 900, 910, 910)


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_class_added_to_quarter_within_limit(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        quarter = add("Fall 2022-23", "quarter", _FALL)
        library.units(rules, quarter)
        library.unit_max(rules, quarter, 22)
        add("MATH 19", "class", units=3)

        place("MATH 19", _IN_FALL)
        assert quarter.get(Prop.TOTAL_UNITS) == 3
        assert quarter.errors == {}

    def test_over_limit_then_removed(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        quarter = add("Fall 2022-23", "quarter", _FALL)
        library.units(rules, quarter)
        library.unit_max(rules, quarter, 22)
        add("BIG 1", "class", units=25)

        place("BIG 1", _IN_FALL)
        assert quarter.get(Prop.TOTAL_UNITS) == 25
        assert quarter.errors == {"units-max": ">22 units"}

        place("BIG 1", _NOWHERE)
        assert quarter.get(Prop.TOTAL_UNITS) == 0
        assert quarter.errors == {}

    def test_class_in_two_quarters(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        add("Fall 2022-23", "quarter", _FALL)
        add("Winter 2022-23", "quarter", _WINTER)
        cls = add("MATH 19", "class", units=3)
        library.taken_at_most_once(rules, cls)

        place("MATH 19", _IN_FALL, _IN_WINTER)
        assert cls.errors == {"already-taken": "MATH 19 already taken"}

        place("MATH 19", _IN_FALL)
        assert cls.errors == {}

    def test_required_children(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        req = add("Core", "track-req", _FALL)
        library.require_children(rules, req, ["X", "Y"])
        assert req.errors == {"required-children": "Missing (X, Y)"}

        add("X", "class")
        add("Y", "class")
        place("X", _IN_FALL)
        assert req.errors == {"required-children": "Missing (Y)"}

        place("Y", _rect(30, 30, 40, 40))
        assert req.errors == {}

    def test_claim_conflict_between_tracks(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        first = add("Track A", "track-req", _FALL)
        second = add("Track B", "track-req", _rect(5, 5, 50, 50))
        child = add("MATH 19", "class", units=3)
        library.count_once(rules, first)
        library.count_once(rules, second)

        place("MATH 19", _IN_FALL)
        assert child.get(Prop.COUNTED_BY) == {"Track A", "Track B"}
        conflict = "Counted more than once (MATH 19 x2)"
        assert first.errors == {"count-children-once": conflict}
        assert second.errors == {"count-children-once": conflict}

        # Shrink Track B so it no longer holds the class.
        place("Track B", _rect(60, 60, 90, 90))
        assert child.get(Prop.COUNTED_BY) == {"Track A"}
        assert first.errors == {}
        assert second.errors == {}


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------


class TestUnitBounds:
    def test_unit_min(self, rules: RuleContext, add: Callable[..., Entity]) -> None:
        quarter = add("Q", "quarter")
        library.unit_min(rules, quarter, 12)
        assert quarter.errors == {"units-min": "<12 units"}
        quarter.assign(Prop.TOTAL_UNITS, 12)
        assert quarter.errors == {}

    def test_unit_max_tracks_assignment(
        self, rules: RuleContext, add: Callable[..., Entity]
    ) -> None:
        quarter = add("Q", "quarter")
        library.unit_max(rules, quarter, 10)
        quarter.assign(Prop.TOTAL_UNITS, 11)
        assert quarter.errors == {"units-max": ">10 units"}
        quarter.assign(Prop.TOTAL_UNITS, 10)
        assert quarter.errors == {}

    def test_units_follow_child_edits(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        quarter = add("Q", "quarter", _FALL)
        library.units(rules, quarter)
        child = add("C", "class", units=4)
        add("Note", "label")
        place("C", _IN_FALL)
        place("Note", _rect(30, 30, 40, 40))
        assert quarter.get(Prop.TOTAL_UNITS) == 4
        child.assign(Prop.UNITS, 5)
        assert quarter.get(Prop.TOTAL_UNITS) == 5


class TestChildrenRules:
    def test_restrict_children(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        req = add("Electives", "track-req", _FALL)
        library.restrict_children(rules, req, ["CS 221", "CS 229"])
        add("CS 221", "class")
        add("ART 1", "class")
        place("CS 221", _IN_FALL)
        assert req.errors == {}
        place("ART 1", _rect(30, 30, 40, 40))
        assert req.errors == {"restricted-children": "Cannot take ART 1"}
        place("ART 1", _NOWHERE)
        assert req.errors == {}

    def test_children_min(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        req = add("Breadth", "track-req", _FALL)
        library.children_min(rules, req, 2)
        assert req.errors == {"children-min": "<2 children"}
        add("A", "class")
        add("B", "class")
        place("A", _IN_FALL)
        assert req.errors == {"children-min": "<2 children"}
        place("B", _rect(30, 30, 40, 40))
        assert req.errors == {}


class TestScheduling:
    @pytest.fixture
    def schedule_rules(self, registry: EntityRegistry) -> RuleContext:
        return RuleContext(
            registry=registry,
            schedule=ScheduleConfig(years=["2022-23"], quarters=["Fall"], transfer_id="Transfer"),
        )

    def test_unscheduled_class_reported(
        self,
        schedule_rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        track = add("Math Track", "track", _rect(500, 0, 700, 100))
        library.children_scheduled(schedule_rules, track)
        add("Fall 2022-23", "quarter", _FALL)
        add("MATH 19", "class")

        # Two regions: one in the track, one (later) in the quarter.
        place("MATH 19", _rect(510, 10, 520, 20))
        assert track.errors == {"not-scheduled": "(MATH 19) not scheduled"}

        place("MATH 19", _rect(510, 10, 520, 20), _IN_FALL)
        assert track.errors == {}

    def test_transfer_counts_as_scheduled(
        self,
        schedule_rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        track = add("Math Track", "track", _rect(500, 0, 700, 100))
        library.children_scheduled(schedule_rules, track)
        add("Transfer", "transfer", _WINTER)
        add("MATH 19", "class")
        place("MATH 19", _rect(510, 10, 520, 20), _IN_WINTER)
        assert track.errors == {}

    def test_non_class_children_ignored(
        self,
        schedule_rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        track = add("Math Track", "track", _rect(500, 0, 700, 100))
        library.children_scheduled(schedule_rules, track)
        add("Core", "track-req")
        place("Core", _rect(510, 10, 600, 50))
        assert track.errors == {}

    def test_quarter_plus_transfer_is_taken_twice(
        self,
        schedule_rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        add("Fall 2022-23", "quarter", _FALL)
        add("Transfer", "transfer", _WINTER)
        cls = add("MATH 19", "class")
        library.taken_at_most_once(schedule_rules, cls)
        place("MATH 19", _IN_FALL, _IN_WINTER)
        assert cls.errors == {"already-taken": "MATH 19 already taken"}


class TestCountOnce:
    def test_children_without_units_not_reported(
        self,
        rules: RuleContext,
        add: Callable[..., Entity],
        place: Callable[..., None],
    ) -> None:
        first = add("A", "track-req", _FALL)
        second = add("B", "track-req", _rect(5, 5, 50, 50))
        add("Heading", "label")
        library.count_once(rules, first)
        library.count_once(rules, second)
        place("Heading", _IN_FALL)
        assert first.errors == {}
        assert second.errors == {}

