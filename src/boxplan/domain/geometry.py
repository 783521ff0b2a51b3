"""Axis-aligned regions and strict containment.

A region is bound to exactly one entity. An entity may own several regions
(duplicate placements of the same logical item).
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, model_validator

Point = tuple[float, float]


class Region(BaseModel):
    """Rectangle with ``left_top`` strictly less than ``right_bottom`` on both axes."""

    model_config = {"frozen": True}

    left_top: Point
    right_bottom: Point

    @model_validator(mode="after")
    def _check_orientation(self) -> Self:
        if not (
            self.left_top[0] < self.right_bottom[0] and self.left_top[1] < self.right_bottom[1]
        ):
            msg = (
                f"left_top {list(self.left_top)} must be strictly less than "
                f"right_bottom {list(self.right_bottom)} on both axes"
            )
            raise ValueError(msg)
        return self

    def contains(self, other: Region) -> bool:
        """True when *other* lies strictly inside this region (no touching edges)."""
        return (
            self.left_top[0] < other.left_top[0]
            and self.left_top[1] < other.left_top[1]
            and self.right_bottom[0] > other.right_bottom[0]
            and self.right_bottom[1] > other.right_bottom[1]
        )

    def to_list(self) -> list[list[float]]:
        """Serialize as ``[[left, top], [right, bottom]]``."""
        return [list(self.left_top), list(self.right_bottom)]

    @classmethod
    def from_list(cls, raw: list[list[float]]) -> Region:
        """Inverse of :meth:`to_list`. Raises ``ValueError`` on bad shapes."""
        if not isinstance(raw, (list, tuple)) or len(raw) != 2:
            msg = f"Expected [[left, top], [right, bottom]], got {raw!r}"
            raise ValueError(msg)
        return cls.model_validate({"left_top": raw[0], "right_bottom": raw[1]})
