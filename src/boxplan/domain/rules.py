"""Declarative rule descriptors.

Each entity in a layout declares the rules attached to it as a list of
tagged descriptors. The ``kind`` field selects the handler applied by
:class:`boxplan.rules.dispatch.RuleDispatcher`. Descriptors carry parameters
only; they never carry code.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class _Descriptor(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}


class UnitMax(_Descriptor):
    """Error when ``total-units`` exceeds *limit*."""

    kind: Literal["unit-max"] = "unit-max"
    limit: int | float


class UnitMin(_Descriptor):
    """Error when ``total-units`` is below *limit*."""

    kind: Literal["unit-min"] = "unit-min"
    limit: int | float


class TakenAtMostOnce(_Descriptor):
    """Error when scheduled under more than one quarter (or the transfer entity)."""

    kind: Literal["taken-at-most-once"] = "taken-at-most-once"


class RequireChildren(_Descriptor):
    """Error listing required ids missing from the children."""

    kind: Literal["require-children"] = "require-children"
    ids: list[str]


class RestrictChildren(_Descriptor):
    """Error listing children outside the allowed ids."""

    kind: Literal["restrict-children"] = "restrict-children"
    ids: list[str]


class ChildrenMin(_Descriptor):
    """Error when fewer than *count* children are present."""

    kind: Literal["children-min"] = "children-min"
    count: int = Field(ge=0)


class ChildrenScheduled(_Descriptor):
    """Error listing class children not placed in any known quarter."""

    kind: Literal["children-scheduled"] = "children-scheduled"


class Units(_Descriptor):
    """Maintain ``total-units`` as the live sum of the children's ``units``."""

    kind: Literal["units"] = "units"


class CountOnce(_Descriptor):
    """Claim each child with units; error when a child is claimed more than once."""

    kind: Literal["count-once"] = "count-once"


class ErrorColor(_Descriptor):
    """Colour the entity's regions while any error is active."""

    kind: Literal["error-color"] = "error-color"


class DisplayText(_Descriptor):
    """Render units and active error messages as region text."""

    kind: Literal["display-text"] = "display-text"


class CustomRule(_Descriptor):
    """Rule provided by a plugin, looked up by *name* at dispatch time."""

    kind: Literal["custom"] = "custom"
    name: str
    params: dict[str, Any] = Field(default_factory=dict)


RuleDescriptor = Annotated[
    UnitMax
    | UnitMin
    | TakenAtMostOnce
    | RequireChildren
    | RestrictChildren
    | ChildrenMin
    | ChildrenScheduled
    | Units
    | CountOnce
    | ErrorColor
    | DisplayText
    | CustomRule,
    Field(discriminator="kind"),
]
