"""GraphEngine: NetworkX view over the board's containment relation.

Built on demand from the entities' ``children`` maps (edge parent -> child,
attribute ``count``). The reactive store stays the source of truth; the
graph is only used for read-only analysis (hierarchy, symmetry audit).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from boxplan.domain.types import Relation

if TYPE_CHECKING:
    from boxplan.engine.store import EntityRegistry

_Graph = nx.DiGraph


class GraphEngine:
    """Lazy-built containment graph for one registry."""

    def __init__(self, registry: EntityRegistry) -> None:
        self._registry = registry
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def _build(self) -> _Graph:
        g: _Graph = nx.DiGraph()
        for entity in self._registry:
            g.add_node(entity.id, type=entity.type)
        for entity in self._registry:
            for child_id, count in entity.get(Relation.CHILDREN, dict).items():
                g.add_edge(entity.id, child_id, count=count)
        return g

    def asymmetries(self) -> list[dict[str, object]]:
        """Pairs where ``A.children[B] != B.parents[A]``.

        Checks both directions so an entry present only on the parents side
        is reported too.
        """
        issues: list[dict[str, object]] = []
        g = self.graph
        for parent_id, child_id, count in g.edges(data="count"):
            mirrored = self._registry.get(child_id).get(Relation.PARENTS, dict).get(parent_id, 0)
            if mirrored != count:
                issues.append(
                    {"parent": parent_id, "child": child_id, "children": count, "parents": mirrored}
                )
        for entity in self._registry:
            for parent_id, count in entity.get(Relation.PARENTS, dict).items():
                if not g.has_edge(parent_id, entity.id):
                    issues.append(
                        {"parent": parent_id, "child": entity.id, "children": 0, "parents": count}
                    )
        return issues
