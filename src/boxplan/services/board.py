"""BoardService: evaluate, inspect, and edit a board's placements.

Every operation loads the configured layout on first use (see
:meth:`BaseService._ensure_loaded`), so a missing or invalid layout
surfaces as a ``NO_LAYOUT`` / ``INVALID_LAYOUT`` result instead of a
traceback.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from boxplan.domain.display import RecordedDisplay
from boxplan.domain.geometry import Point, Region
from boxplan.domain.types import Prop
from boxplan.engine.store import Entity, UnknownEntityError
from boxplan.services.base import BaseService
from boxplan.services.result import ServiceResult
from boxplan.services.telemetry import trace_span, traced


def _looks(entity: Entity) -> tuple[str, str]:
    """Text and colour of the entity's first recorded display."""
    for display in entity.displays:
        if isinstance(display, RecordedDisplay):
            return display.text, display.color
    return "", ""


def _sorted_counts(counts: dict[str, int]) -> dict[str, int]:
    return dict(sorted(counts.items()))


class BoardService(BaseService):
    """Read and mutate the live board."""

    @traced
    def check(self, *, errors_only: bool = False) -> ServiceResult:
        """Evaluate every rule and report each entity with its active errors.

        With *errors_only*, entities without errors are left out of
        ``items``; ``total`` still counts every active error.
        """
        op = "check"
        warnings: list[str] = []
        failure = self._ensure_loaded(op, warnings)
        if failure is not None:
            return failure

        items: list[dict[str, Any]] = []
        total = 0
        with trace_span("collect_errors") as span:
            for entity in self._board.registry:
                errors = entity.errors
                total += len(errors)
                if errors_only and not errors:
                    continue
                text, _color = _looks(entity)
                items.append(
                    {
                        "id": entity.id,
                        "type": entity.type,
                        "errors": list(errors.values()),
                        "text": text,
                    }
                )
            if span:
                span.annotate("entities", len(self._board.registry))

        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(items), "total": total, "items": items},
            warnings=warnings,
        )

    @traced
    def show(self, entity_id: str) -> ServiceResult:
        """Full state of one entity: rectangles, relations, units, errors."""
        op = "show"
        warnings: list[str] = []
        failure = self._ensure_loaded(op, warnings)
        if failure is not None:
            return failure

        try:
            entity = self._board.entity(entity_id)
        except UnknownEntityError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), id=entity_id)

        text, color = _looks(entity)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": entity.id,
                "type": entity.type,
                "regions": [region.to_list() for region in entity.regions],
                "parents": _sorted_counts(entity.get(Prop.PARENTS, dict)),
                "children": _sorted_counts(entity.get(Prop.CHILDREN, dict)),
                "units": entity.get(Prop.UNITS, lambda: None),
                "total_units": entity.get(Prop.TOTAL_UNITS, lambda: None),
                "errors": entity.errors,
                "counted_by": sorted(entity.get(Prop.COUNTED_BY, set)),
                "text": text,
                "color": color,
            },
            warnings=warnings,
        )

    @traced
    def move(
        self,
        entity_id: str,
        index: int,
        left_top: Point,
        right_bottom: Point,
        *,
        save: bool = True,
    ) -> ServiceResult:
        """Replace rectangle *index* of *entity_id* and recalculate.

        The reply reports the relation changes of the moved entity and its
        errors afterwards. Unless *save* is False a snapshot is persisted.
        """
        op = "move"
        warnings: list[str] = []
        failure = self._ensure_loaded(op, warnings)
        if failure is not None:
            return failure

        try:
            region = Region(left_top=left_top, right_bottom=right_bottom)
        except ValidationError as exc:
            return ServiceResult.failure(
                op, "INVALID_REGION", f"Invalid rectangle: {exc.errors()[0]['msg']}", id=entity_id
            )

        try:
            with trace_span("recalculate"):
                delta = self._board.move_region(entity_id, index, region, warnings=warnings)
        except UnknownEntityError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), id=entity_id)
        except IndexError as exc:
            return ServiceResult.failure(op, "INVALID_REGION", str(exc), id=entity_id, index=index)

        data: dict[str, Any] = {
            "id": entity_id,
            "index": index,
            "region": region.to_list(),
            "parents": _sorted_counts(delta.parents),
            "children": _sorted_counts(delta.children),
            "errors": self._board.entity(entity_id).errors,
        }
        if save:
            with trace_span("save_snapshot"):
                data["snapshot_id"] = self._board.save_snapshot(warnings=warnings)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def save(self) -> ServiceResult:
        """Persist a snapshot of every entity's current rectangles."""
        op = "save"
        warnings: list[str] = []
        failure = self._ensure_loaded(op, warnings)
        if failure is not None:
            return failure

        snapshot_id = self._board.save_snapshot(warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"snapshot_id": snapshot_id, "count": len(self._board.registry)},
            warnings=warnings,
        )
