"""Pluggy hook specifications for boxplan board events and rule extensions.

Two board events are dispatched synchronously after the engine settles.
One setup-time hook lets plugins contribute ``custom`` rule handlers.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("boxplan")
hookimpl = pluggy.HookimplMarker("boxplan")


class BoxplanHookSpec:
    """Hook specifications for the boxplan plugin system."""

    @hookspec
    def post_recalculate(
        self,
        entity_id: str,
        parents: dict[str, int],
        children: dict[str, int],
    ) -> None:
        """Called after a containment recalculation changed some relation."""

    @hookspec
    def post_save(self, snapshot_id: int, entity_count: int) -> None:
        """Called after a placement snapshot is persisted."""

    @hookspec
    def register_rule_handlers(self) -> dict[str, Any] | None:
        """Return ``name -> handler(ctx, entity, params)`` for custom rules."""
