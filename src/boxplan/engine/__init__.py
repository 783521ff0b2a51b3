"""Reactive engine: property store, containment, propagation, combinator.

This layer depends only on stdlib and the domain layer. All cascades are
synchronous: a ``set`` returns only after every listener (and every
listener those listeners triggered) has run.
"""

from boxplan.engine.combinator import RelationHooks, RelationSubscription, subscribe_relation
from boxplan.engine.containment import ContainmentDelta, ContainmentResolver
from boxplan.engine.propagation import DeltaPropagator
from boxplan.engine.store import (
    Entity,
    EntityRegistry,
    UninitializedPropertyError,
    UnknownEntityError,
)

__all__ = [
    "ContainmentDelta",
    "ContainmentResolver",
    "DeltaPropagator",
    "Entity",
    "EntityRegistry",
    "RelationHooks",
    "RelationSubscription",
    "UninitializedPropertyError",
    "UnknownEntityError",
    "subscribe_relation",
]
