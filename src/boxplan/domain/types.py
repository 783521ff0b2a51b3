"""Entity type tags, relation names, and well-known property names."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Common entity type tags. The tag set is open; layouts may use others."""

    CLASS = "class"
    QUARTER = "quarter"
    TRACK = "track"
    TRACK_REQ = "track-req"
    TRANSFER = "transfer"


class Relation(StrEnum):
    """The two sides of the derived containment relation."""

    PARENTS = "parents"
    CHILDREN = "children"

    @property
    def mirror(self) -> Relation:
        """The relation stored on the relative for the same pair."""
        return Relation.CHILDREN if self is Relation.PARENTS else Relation.PARENTS


class Prop(StrEnum):
    """Property names read or written by the engine and rule library."""

    PARENTS = "parents"
    CHILDREN = "children"
    UNITS = "units"
    TOTAL_UNITS = "total-units"
    ERRORS = "errors"
    COUNTED_BY = "counted-by"
