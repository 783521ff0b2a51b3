"""Validation rules composed from :func:`subscribe_relation`.

Each rule owns its error label on the entity it is attached to; no rule
reads or clears another rule's label.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from boxplan.config.models import DisplayConfig, ScheduleConfig
from boxplan.domain.types import EntityType, Prop, Relation
from boxplan.engine.combinator import RelationHooks, RelationSubscription, subscribe_relation
from boxplan.engine.store import Entity, EntityRegistry


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule needs besides the entity it is attached to."""

    registry: EntityRegistry
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


# ---------------------------------------------------------------------------
# Unit bounds (read total-units directly)
# ---------------------------------------------------------------------------


def unit_max(ctx: RuleContext, entity: Entity, limit: int | float) -> None:
    def check() -> None:
        if entity.get(Prop.TOTAL_UNITS, int) > limit:
            entity.set_error("units-max", f">{limit} units")
        else:
            entity.clear_error("units-max")

    entity.subscribe(Prop.TOTAL_UNITS, "unit-max", check)
    check()


def unit_min(ctx: RuleContext, entity: Entity, limit: int | float) -> None:
    def check() -> None:
        if entity.get(Prop.TOTAL_UNITS, int) < limit:
            entity.set_error("units-min", f"<{limit} units")
        else:
            entity.clear_error("units-min")

    entity.subscribe(Prop.TOTAL_UNITS, "unit-min", check)
    check()


# ---------------------------------------------------------------------------
# Relation rules
# ---------------------------------------------------------------------------


def taken_at_most_once(ctx: RuleContext, entity: Entity) -> RelationSubscription:
    """Error when more than one quarter (or the transfer entity) holds *entity*."""
    transfer_id = ctx.schedule.transfer_id

    def project(parent: Entity) -> bool | None:
        if parent.type == EntityType.QUARTER or parent.id == transfer_id:
            return True
        return None

    def update(scheduled: dict[str, Any]) -> None:
        if len(scheduled) > 1:
            entity.set_error("already-taken", f"{entity.id} already taken")
        else:
            entity.clear_error("already-taken")

    return subscribe_relation(ctx.registry, entity, Relation.PARENTS, "taken-once", project, update)


def require_children(ctx: RuleContext, entity: Entity, ids: Iterable[str]) -> RelationSubscription:
    required = frozenset(ids)

    def project(child: Entity) -> bool | None:
        return True if child.id in required else None

    def update(present: dict[str, Any]) -> None:
        missing = sorted(required - present.keys())
        if missing:
            entity.set_error("required-children", f"Missing ({', '.join(missing)})")
        else:
            entity.clear_error("required-children")

    return subscribe_relation(
        ctx.registry, entity, Relation.CHILDREN, "required-children", project, update
    )


def restrict_children(ctx: RuleContext, entity: Entity, ids: Iterable[str]) -> RelationSubscription:
    allowed = frozenset(ids)

    def project(child: Entity) -> bool | None:
        return True if child.id not in allowed else None

    def update(violations: dict[str, Any]) -> None:
        if violations:
            entity.set_error("restricted-children", f"Cannot take {', '.join(sorted(violations))}")
        else:
            entity.clear_error("restricted-children")

    return subscribe_relation(
        ctx.registry, entity, Relation.CHILDREN, "restricted-children", project, update
    )


def children_min(ctx: RuleContext, entity: Entity, count: int) -> RelationSubscription:
    def update(children: dict[str, Any]) -> None:
        if len(children) < count:
            entity.set_error("children-min", f"<{count} children")
        else:
            entity.clear_error("children-min")

    return subscribe_relation(
        ctx.registry, entity, Relation.CHILDREN, "children-min", lambda _child: True, update
    )


def children_scheduled(ctx: RuleContext, entity: Entity) -> RelationSubscription:
    """Error listing class children that no known quarter (or transfer) holds."""
    slots = ctx.schedule.slot_ids()
    transfer_id = ctx.schedule.transfer_id

    def project(child: Entity) -> bool | None:
        if child.type != EntityType.CLASS:
            return None
        parents: dict[str, int] = child.get(Prop.PARENTS, dict)
        if transfer_id in parents or any(parent_id in slots for parent_id in parents):
            return None
        return True

    def update(missing: dict[str, Any]) -> None:
        if missing:
            entity.set_error("not-scheduled", f"({', '.join(sorted(missing))}) not scheduled")
        else:
            entity.clear_error("not-scheduled")

    return subscribe_relation(
        ctx.registry,
        entity,
        Relation.CHILDREN,
        "not-scheduled",
        project,
        update,
        track=Prop.PARENTS,
    )


# ---------------------------------------------------------------------------
# Aggregates and claims
# ---------------------------------------------------------------------------


def units(ctx: RuleContext, entity: Entity) -> RelationSubscription:
    """Keep ``total-units`` equal to the sum of the children's ``units``."""

    def update(contributions: dict[str, Any]) -> None:
        entity.assign(Prop.TOTAL_UNITS, sum(contributions.values()))

    return subscribe_relation(
        ctx.registry,
        entity,
        Relation.CHILDREN,
        "total-units",
        lambda child: child.get(Prop.UNITS, lambda: None),
        update,
        track=Prop.UNITS,
    )


def count_once(ctx: RuleContext, entity: Entity) -> RelationSubscription:
    """Claim every child exposing units; error while any claim is contested."""

    def claim(child: Entity) -> None:
        child.set(Prop.COUNTED_BY, set, lambda claimants: claimants.add(entity.id))

    def release(child: Entity) -> None:
        child.set(Prop.COUNTED_BY, set, lambda claimants: claimants.discard(entity.id))

    def project(child: Entity) -> int | None:
        if child.get(Prop.UNITS, lambda: None) is None:
            return None
        claims = len(child.get(Prop.COUNTED_BY, set))
        return claims if claims > 1 else None

    def update(violations: dict[str, Any]) -> None:
        if violations:
            counts = ", ".join(f"{cid} x{violations[cid]}" for cid in sorted(violations))
            entity.set_error("count-children-once", f"Counted more than once ({counts})")
        else:
            entity.clear_error("count-children-once")

    return subscribe_relation(
        ctx.registry,
        entity,
        Relation.CHILDREN,
        "count-children-once",
        project,
        update,
        track=Prop.COUNTED_BY,
        hooks=RelationHooks(enter=claim, exit=release),
    )
