"""Relation combinator: reactive aggregation over a dynamic relative set.

:func:`subscribe_relation` watches one relation (``parents`` or
``children``) of a target entity. Each relative present in the relation is
projected through ``project``; non-``None`` projections are kept in a
``relative_id -> value`` state map that is handed to ``callback`` after every
change. Optionally one property on each relative is tracked, so the
projection is recomputed whenever that property changes.

Membership transitions:

- **enter** (relative goes from absent to present, whatever the jump size):
  run the enter hook, subscribe the tracked property, seed the projection;
- **exit** (relative no longer present): run the exit hook, drop its state,
  detach the tracked property, fire the callback;
- count changes that stay positive fire neither.

Every validation rule in :mod:`boxplan.rules.library` is a thin
composition of this combinator.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from boxplan.domain.types import Relation
from boxplan.engine.store import Entity, EntityRegistry

logger = logging.getLogger(__name__)

Projection = Callable[[Entity], Any]
StateCallback = Callable[[dict[str, Any]], None]
Hook = Callable[[Entity], None]


@dataclass(frozen=True)
class RelationHooks:
    """Optional membership hooks, each receiving the relative entity."""

    enter: Hook | None = None
    exit: Hook | None = None


class RelationSubscription:
    """Live aggregation of one relation on one target entity.

    Attributes:
        state: ``relative_id -> last non-None projection`` for present relatives.
        members: Ids of relatives currently inside the relation.
    """

    def __init__(
        self,
        registry: EntityRegistry,
        target: Entity,
        relation: Relation,
        label: str,
        project: Projection,
        callback: StateCallback,
        *,
        track: str | None = None,
        hooks: RelationHooks | None = None,
    ) -> None:
        self._registry = registry
        self.target = target
        self.relation = relation
        self.label = label
        self._project = project
        self._callback = callback
        self.track = track
        self._hooks = hooks or RelationHooks()
        self.state: dict[str, Any] = {}
        self.members: set[str] = set()

    @property
    def tracked_label(self) -> str:
        """Label used on relatives' tracked property, unique per target."""
        return f"{self.label}:{self.target.id}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def install(self) -> RelationSubscription:
        """Listen to the relation and enter every relative already present.

        The callback sees the initial state even when the relation is empty.
        """
        self.target.subscribe(self.relation, self.label, self._on_relation_delta)
        present = list(self.target.get(self.relation, dict))
        for relative_id in present:
            self._enter(self._registry.get(relative_id))
        if not present:
            self._callback(self.state)
        return self

    def detach(self) -> None:
        """Stop listening to the relation and to every tracked property."""
        self.target.unsubscribe(self.relation, self.label)
        if self.track is not None:
            for relative_id in self.members:
                self._registry.get(relative_id).unsubscribe(self.track, self.tracked_label)
        self.members.clear()
        self.state.clear()

    # ------------------------------------------------------------------
    # Reactions
    # ------------------------------------------------------------------

    def _on_relation_delta(self, updated: Mapping[str, int]) -> None:
        present: dict[str, int] = self.target.get(self.relation, dict)
        for relative_id in list(updated):
            is_present = present.get(relative_id, 0) > 0
            was_member = relative_id in self.members
            if was_member and not is_present:
                self._exit(self._registry.get(relative_id))
            elif is_present and not was_member:
                self._enter(self._registry.get(relative_id))

    def _enter(self, relative: Entity) -> None:
        self.members.add(relative.id)
        if self._hooks.enter is not None:
            self._hooks.enter(relative)

        def refresh() -> None:
            self._refresh(relative)

        if self.track is not None:
            relative.subscribe(self.track, self.tracked_label, refresh)
        refresh()

    def _exit(self, relative: Entity) -> None:
        if self._hooks.exit is not None:
            self._hooks.exit(relative)
        self.members.discard(relative.id)
        self.state.pop(relative.id, None)
        if self.track is not None:
            relative.unsubscribe(self.track, self.tracked_label)
        self._callback(self.state)

    def _refresh(self, relative: Entity) -> None:
        if relative.id not in self.members:
            return
        result = self._project(relative)
        if result is not None:
            self.state[relative.id] = result
        else:
            self.state.pop(relative.id, None)
        self._callback(self.state)


def subscribe_relation(
    registry: EntityRegistry,
    target: Entity,
    relation: Relation,
    label: str,
    project: Projection,
    callback: StateCallback,
    *,
    track: str | None = None,
    hooks: RelationHooks | None = None,
) -> RelationSubscription:
    """Create and install a :class:`RelationSubscription`.

    Args:
        registry: Registry resolving relative ids to entities.
        target: Entity whose relation is observed.
        relation: ``parents`` or ``children``.
        label: Subscription label, unique among the target's rules.
        project: ``relative -> value``; ``None`` filters the relative out.
        callback: Receives the current state map after every change.
        track: Property on each relative whose changes re-run ``project``.
        hooks: Optional enter/exit hooks.
    """
    subscription = RelationSubscription(
        registry,
        target,
        relation,
        label,
        project,
        callback,
        track=track,
        hooks=hooks,
    )
    logger.debug("Subscribing %s on %s.%s", label, target.id, relation)
    return subscription.install()
