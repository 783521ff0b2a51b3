"""Containment resolver: derives parent/child multiplicity from regions.

For an origin entity whose regions changed, every other entity is scanned
and, across the full cross-product of both entities' regions, two counts
are taken:

- how many candidate regions strictly contain an origin region
  (the candidate acts as a parent), and
- how many candidate regions are strictly contained by an origin region
  (the candidate acts as a child).

Only counts that differ from what the origin currently stores are
reported. The scan is O((entities x regions)^2) per call, which is fine for
a board recalculated once per geometry change.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from boxplan.domain.types import Relation
from boxplan.engine.store import EntityRegistry


@dataclass(frozen=True)
class ContainmentDelta:
    """Changed relation counts for one origin entity.

    Each map holds ``relative_id -> new count``; a count of 0 means the
    relation must be removed.
    """

    entity_id: str
    parents: dict[str, int] = field(default_factory=dict)
    children: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.parents and not self.children

    def for_relation(self, relation: Relation) -> dict[str, int]:
        return self.parents if relation is Relation.PARENTS else self.children


class ContainmentResolver:
    """Computes changed containment counts against the registry."""

    def __init__(self, registry: EntityRegistry) -> None:
        self._registry = registry

    def resolve(self, entity_id: str) -> ContainmentDelta:
        """Return the relation counts for *entity_id* that differ from stored ones."""
        origin = self._registry.get(entity_id)
        stored_parents: dict[str, int] = origin.get(Relation.PARENTS, dict)
        stored_children: dict[str, int] = origin.get(Relation.CHILDREN, dict)

        changed_parents: dict[str, int] = {}
        changed_children: dict[str, int] = {}

        for candidate in self._registry:
            if candidate.id == entity_id:
                continue
            parent_count = 0
            child_count = 0
            for own in origin.regions:
                for other in candidate.regions:
                    if other.contains(own):
                        parent_count += 1
                    if own.contains(other):
                        child_count += 1
            if stored_parents.get(candidate.id, 0) != parent_count:
                changed_parents[candidate.id] = parent_count
            if stored_children.get(candidate.id, 0) != child_count:
                changed_children[candidate.id] = child_count

        return ContainmentDelta(
            entity_id=entity_id,
            parents=changed_parents,
            children=changed_children,
        )
