"""Entity & property store with labeled reactive subscriptions.

Every entity holds a map of named properties. A property is created lazily
on first read, write, or subscribe, and has no value until its first write.
Each property carries an insertion-ordered map of ``label -> callback``;
subscribing twice under one label replaces the earlier callback
(last-write-wins), which makes re-subscription idempotent.

Listener fan-out is synchronous and depth-first: a listener that calls
``set`` on any entity finishes that whole nested cascade before the next
sibling listener of the originating ``set`` runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from boxplan.domain.types import Prop

if TYPE_CHECKING:
    from boxplan.domain.display import Display
    from boxplan.domain.geometry import Region

logger = logging.getLogger(__name__)

Listener = Callable[..., None]

_NO_DELTA: Any = object()


class UninitializedPropertyError(LookupError):
    """A property with no recorded value was read without a default factory.

    This is a programmer fault: some initialization step is missing.
    """

    def __init__(self, entity_id: str, prop: str) -> None:
        self.entity_id = entity_id
        self.prop = prop
        super().__init__(f"Tried to access uninitialized property '{prop}' on '{entity_id}'")


class UnknownEntityError(LookupError):
    """An entity id was looked up that the registry does not hold."""

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"Unknown entity '{entity_id}'")


class _Property:
    __slots__ = ("has_value", "listeners", "value")

    def __init__(self) -> None:
        self.has_value = False
        self.value: Any = None
        self.listeners: dict[str, Listener] = {}


class Entity:
    """Addressable item with identity, an open type tag, and reactive properties.

    Attributes:
        id: Unique identifier (``"MATH 19"``, ``"Fall 2022-23"``).
        type: Type tag (``"class"``, ``"quarter"``, ...).
        regions: Current placements, in declaration order.
        displays: Visual consumers receiving text and colour updates.
    """

    def __init__(
        self,
        entity_id: str,
        entity_type: str,
        *,
        regions: list[Region] | None = None,
    ) -> None:
        self.id = entity_id
        self.type = entity_type
        self.regions: list[Region] = list(regions or [])
        self.displays: list[Display] = []
        self._properties: dict[str, _Property] = {}

    def __repr__(self) -> str:
        return f"Entity({self.id!r}, type={self.type!r})"

    # ------------------------------------------------------------------
    # Property access
    # ------------------------------------------------------------------

    def _cell(self, prop: str) -> _Property:
        cell = self._properties.get(prop)
        if cell is None:
            cell = self._properties[prop] = _Property()
        return cell

    def has(self, prop: str) -> bool:
        """Whether *prop* has been written at least once."""
        cell = self._properties.get(prop)
        return cell is not None and cell.has_value

    def get(self, prop: str, default_factory: Callable[[], Any] | None = None) -> Any:
        """Return the stored value of *prop*.

        If *prop* was never written, return ``default_factory()`` without
        persisting it. Raises :class:`UninitializedPropertyError` when no
        factory is given for an unwritten property.
        """
        cell = self._properties.get(prop)
        if cell is not None and cell.has_value:
            return cell.value
        if default_factory is None:
            raise UninitializedPropertyError(self.id, prop)
        return default_factory()

    def set(
        self,
        prop: str,
        init_factory: Callable[[], Any],
        mutate: Callable[[Any], Any],
        delta: Any = _NO_DELTA,
    ) -> None:
        """Update *prop* and notify its listeners.

        If *prop* is unwritten it is first materialized from
        ``init_factory()``. ``mutate`` receives the current value and either
        changes it in place (returning ``None``) or returns a replacement.
        Every listener subscribed when its turn comes is then called with
        *delta*, or with no argument when *delta* is omitted.
        """
        cell = self._cell(prop)
        if not cell.has_value:
            cell.value = init_factory()
            cell.has_value = True
        replacement = mutate(cell.value)
        if replacement is not None:
            cell.value = replacement
        self._notify(cell, delta)

    def assign(self, prop: str, value: Any, delta: Any = _NO_DELTA) -> None:
        """Overwrite *prop* with *value* (``None`` included) and notify its listeners."""
        cell = self._cell(prop)
        cell.value = value
        cell.has_value = True
        self._notify(cell, delta)

    def _notify(self, cell: _Property, delta: Any) -> None:
        # Labels are snapshotted so listeners may (un)subscribe re-entrantly;
        # a label removed mid-fan-out is skipped, a replaced one runs its newest callback.
        for label in list(cell.listeners):
            listener = cell.listeners.get(label)
            if listener is None:
                continue
            if delta is _NO_DELTA:
                listener()
            else:
                listener(delta)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, prop: str, label: str, callback: Listener) -> None:
        """Install *callback* on *prop* under *label*, replacing any previous one."""
        self._cell(prop).listeners[label] = callback

    def unsubscribe(self, prop: str, label: str) -> None:
        """Remove the callback under *label*. No-op if absent."""
        cell = self._properties.get(prop)
        if cell is not None:
            cell.listeners.pop(label, None)

    def labels(self, prop: str) -> list[str]:
        """Subscription labels on *prop*, in firing order."""
        cell = self._properties.get(prop)
        return list(cell.listeners) if cell is not None else []

    # ------------------------------------------------------------------
    # Named error slots
    # ------------------------------------------------------------------

    def set_error(self, label: str, message: str) -> None:
        """Activate (or overwrite) the error slot *label*.

        Listeners on ``errors`` run only when the mapping actually changes.
        """
        errors: dict[str, str] = self.get(Prop.ERRORS, dict)
        if errors.get(label) == message:
            return

        def _put(current: dict[str, str]) -> dict[str, str]:
            current[label] = message
            return current

        self.set(Prop.ERRORS, dict, _put)

    def clear_error(self, label: str) -> None:
        """Deactivate the error slot *label*. No-op if not active."""
        if label not in self.get(Prop.ERRORS, dict):
            return

        def _drop(current: dict[str, str]) -> dict[str, str]:
            current.pop(label, None)
            return current

        self.set(Prop.ERRORS, dict, _drop)

    @property
    def errors(self) -> dict[str, str]:
        """Snapshot of the currently active error slots."""
        return dict(self.get(Prop.ERRORS, dict))

    # ------------------------------------------------------------------
    # Display fan-out
    # ------------------------------------------------------------------

    def set_text(self, text: str) -> None:
        for display in self.displays:
            display.set_text(text)

    def set_color(self, color: str) -> None:
        for display in self.displays:
            display.set_color(color)


class EntityRegistry:
    """The single entity registry for one board.

    Injected into the resolver, propagator, and every relation subscription
    rather than living in module state.
    """

    def __init__(self) -> None:
        self._entities: dict[str, Entity] = {}

    def add(self, entity: Entity) -> Entity:
        """Register *entity*. Ids must be unique for the registry's lifetime."""
        if entity.id in self._entities:
            msg = f"Entity '{entity.id}' is already registered"
            raise ValueError(msg)
        self._entities[entity.id] = entity
        logger.debug("Registered entity %s (%s)", entity.id, entity.type)
        return entity

    def get(self, entity_id: str) -> Entity:
        """Return the entity for *entity_id* or raise :class:`UnknownEntityError`."""
        try:
            return self._entities[entity_id]
        except KeyError:
            raise UnknownEntityError(entity_id) from None

    def ids(self) -> list[str]:
        return list(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)
