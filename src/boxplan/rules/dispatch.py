"""Fixed dispatcher applying declarative rule descriptors to entities.

Built-in descriptor kinds map to the functions in
:mod:`boxplan.rules.library` and :mod:`boxplan.rules.display`. ``custom``
descriptors are resolved by name against handlers registered by plugins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from boxplan.domain.rules import CustomRule, RuleDescriptor
from boxplan.engine.store import Entity
from boxplan.rules import display, library
from boxplan.rules.library import RuleContext

logger = logging.getLogger(__name__)

Handler = Callable[[RuleContext, Entity, Any], Any]
CustomHandler = Callable[[RuleContext, Entity, dict[str, Any]], Any]


class UnknownRuleError(LookupError):
    """A ``custom`` descriptor named a handler nobody registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No handler registered for custom rule '{name}'")


def _builtin_handlers() -> dict[str, Handler]:
    def bound(fn: Callable[..., Any]) -> Handler:
        return lambda ctx, entity, _descriptor: fn(ctx, entity)

    return {
        "unit-max": lambda ctx, entity, d: library.unit_max(ctx, entity, d.limit),
        "unit-min": lambda ctx, entity, d: library.unit_min(ctx, entity, d.limit),
        "taken-at-most-once": bound(library.taken_at_most_once),
        "require-children": lambda ctx, entity, d: library.require_children(ctx, entity, d.ids),
        "restrict-children": lambda ctx, entity, d: library.restrict_children(ctx, entity, d.ids),
        "children-min": lambda ctx, entity, d: library.children_min(ctx, entity, d.count),
        "children-scheduled": bound(library.children_scheduled),
        "units": bound(library.units),
        "count-once": bound(library.count_once),
        "error-color": bound(display.error_color),
        "display-text": bound(display.display_text),
    }


class RuleDispatcher:
    """Maps descriptor kinds (and custom rule names) to handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = _builtin_handlers()
        self._custom: dict[str, CustomHandler] = {}

    def register_custom(self, name: str, handler: CustomHandler) -> None:
        """Register a handler for ``{kind = "custom", name = <name>}`` descriptors."""
        self._custom[name] = handler
        logger.debug("Registered custom rule handler: %s", name)

    @property
    def custom_names(self) -> list[str]:
        return sorted(self._custom)

    def validate(self, descriptors: Iterable[RuleDescriptor]) -> None:
        """Raise :class:`UnknownRuleError` for the first unregistered custom name."""
        for descriptor in descriptors:
            if isinstance(descriptor, CustomRule) and descriptor.name not in self._custom:
                raise UnknownRuleError(descriptor.name)

    def apply(
        self,
        ctx: RuleContext,
        entity: Entity,
        descriptors: Iterable[RuleDescriptor],
    ) -> None:
        """Attach every rule in *descriptors* to *entity*, in order."""
        for descriptor in descriptors:
            if isinstance(descriptor, CustomRule):
                handler = self._custom.get(descriptor.name)
                if handler is None:
                    raise UnknownRuleError(descriptor.name)
                handler(ctx, entity, dict(descriptor.params))
            else:
                self._handlers[descriptor.kind](ctx, entity, descriptor)
            logger.debug("Applied rule %s to %s", descriptor.kind, entity.id)

