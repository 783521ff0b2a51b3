"""GraphService: read-only analysis of the containment relation.

Uses ``self._board.graph.graph`` (a NetworkX DiGraph, parent -> child,
rebuilt lazily after any containment change).
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from boxplan.services.base import BaseService
from boxplan.services.result import ServiceResult
from boxplan.services.telemetry import trace_span, traced


class GraphService(BaseService):
    """Hierarchy views and the symmetry audit."""

    @traced
    def tree(self, root: str | None = None) -> ServiceResult:
        """Containment hierarchy as nested nodes.

        With *root*, only that entity's subtree; otherwise one tree per
        entity that has no parents. An entity reachable along several paths
        is expanded once; later occurrences carry ``"seen": True``.
        """
        op = "tree"
        warnings: list[str] = []
        failure = self._ensure_loaded(op, warnings)
        if failure is not None:
            return failure

        g = self._board.graph.graph
        if root is not None:
            if root not in g:
                return ServiceResult.failure(op, "NOT_FOUND", f"Unknown entity '{root}'", id=root)
            roots = [root]
        else:
            roots = sorted(n for n in g.nodes if g.in_degree(n) == 0)

        visited: set[str] = set()
        with trace_span("walk"):
            trees = [self._subtree(g, node, None, visited) for node in roots]

        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(visited), "roots": trees},
            warnings=warnings,
        )

    @classmethod
    def _subtree(
        cls,
        g: nx.DiGraph,
        node: str,
        count: int | None,
        visited: set[str],
    ) -> dict[str, Any]:
        out: dict[str, Any] = {"id": node, "type": g.nodes[node].get("type", "")}
        if count is not None:
            out["count"] = count
        if node in visited:
            out["seen"] = True
            return out
        visited.add(node)
        out["children"] = [
            cls._subtree(g, child, g.edges[node, child]["count"], visited)
            for child in sorted(g.successors(node))
        ]
        return out

    @traced
    def verify(self) -> ServiceResult:
        """Check that every ``A.children[B]`` equals ``B.parents[A]``."""
        op = "verify"
        warnings: list[str] = []
        failure = self._ensure_loaded(op, warnings)
        if failure is not None:
            return failure

        issues = self._board.graph.asymmetries()
        if issues:
            return ServiceResult.failure(
                op,
                "ASYMMETRIC",
                f"{len(issues)} asymmetric containment pair(s)",
                issues=issues,
            )
        g = self._board.graph.graph
        return ServiceResult(
            ok=True,
            op=op,
            data={"nodes": g.number_of_nodes(), "edges": g.number_of_edges()},
            warnings=warnings,
        )
