"""Layout document models.

A layout declares every entity on the board: its id, type tag, initial
property values, attached rules, and default placements. Layouts are
written in TOML or JSON::

    [[entities]]
    id = "Fall 2022-23"
    type = "quarter"
    rules = [{ kind = "unit-max", limit = 22 }, { kind = "units" }]
    regions = [{ left_top = [0, 0], right_bottom = [80, 160] }]
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, Field, model_validator

from boxplan.domain.geometry import Region
from boxplan.domain.rules import RuleDescriptor


class EntitySpec(BaseModel):
    """One entity declaration."""

    model_config = {"frozen": True}

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    properties: dict[str, Any] = Field(default_factory=dict)
    rules: list[RuleDescriptor] = Field(default_factory=list)
    regions: list[Region] = Field(default_factory=list)


class LayoutDocument(BaseModel):
    """Root layout: an ordered list of entity declarations with unique ids."""

    model_config = {"frozen": True}

    entities: list[EntitySpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> Self:
        seen: set[str] = set()
        for spec in self.entities:
            if spec.id in seen:
                msg = f"Duplicate entity id: {spec.id}"
                raise ValueError(msg)
            seen.add(spec.id)
        return self
