"""Delta propagator: commits relation changes symmetrically.

For each changed relative the origin's map and the relative's mirrored map
(``children`` mirrors ``parents``) are both written through the store's
``set`` so that listeners on either side observe the same physical event.
Listeners receive ``{other_id: delta}`` with ``delta = new - previous``.

The relative's write happens inside the origin's mutation, so by the time
any listener on either side runs, both maps already agree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from boxplan.domain.types import Relation
from boxplan.engine.containment import ContainmentDelta, ContainmentResolver
from boxplan.engine.store import Entity, EntityRegistry

logger = logging.getLogger(__name__)


def _write_count(relative_id: str, count: int) -> Callable[[dict[str, int]], dict[str, int]]:
    def mutate(current: dict[str, int]) -> dict[str, int]:
        if count == 0:
            current.pop(relative_id, None)
        else:
            current[relative_id] = count
        return current

    return mutate


class DeltaPropagator:
    """Applies resolver output to both sides of the relation."""

    def __init__(
        self,
        registry: EntityRegistry,
        resolver: ContainmentResolver | None = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver or ContainmentResolver(registry)

    def recalculate(self, entity_id: str) -> ContainmentDelta:
        """Resolve containment for *entity_id* and commit the changes.

        Returns the delta that was applied; an empty delta means the stored
        relations already matched the geometry.
        """
        delta = self._resolver.resolve(entity_id)
        for relation in Relation:
            self.apply(entity_id, relation, delta.for_relation(relation))
        return delta

    def apply(
        self,
        origin_id: str,
        relation: Relation,
        changes: Mapping[str, int],
    ) -> None:
        """Commit ``relative_id -> new count`` for *relation* on *origin_id*."""
        origin = self._registry.get(origin_id)

        for relative_id, new_count in changes.items():
            if new_count < 0:
                msg = f"Negative containment count {new_count} for {origin_id}/{relative_id}"
                raise ValueError(msg)
            relative = self._registry.get(relative_id)
            previous = origin.get(relation, dict).get(relative_id, 0)
            if new_count == previous:
                continue
            self._commit(origin, relative, relation, new_count, new_count - previous)

            if new_count == 0:
                logger.debug("%s no longer includes %s in its %s", origin_id, relative_id, relation)
            else:
                logger.debug(
                    "%s includes %s in its %s with count %d",
                    origin_id,
                    relative_id,
                    relation,
                    new_count,
                )

    @staticmethod
    def _commit(
        origin: Entity,
        relative: Entity,
        relation: Relation,
        count: int,
        delta: int,
    ) -> None:
        write_origin = _write_count(relative.id, count)
        write_relative = _write_count(origin.id, count)

        def mutate_origin(current: dict[str, int]) -> dict[str, int]:
            updated = write_origin(current)
            relative.set(relation.mirror, dict, write_relative, {origin.id: delta})
            return updated

        origin.set(relation, dict, mutate_origin, {relative.id: delta})
