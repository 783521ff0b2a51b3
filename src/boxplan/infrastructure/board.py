"""Board: the single dependency injected into every service.

The Board owns one :class:`EntityRegistry` and everything wired around it:
the containment propagator, the rule dispatcher, the lazily-built graph
view, the snapshot database, and the plugin manager. It is the geometry
input boundary: placing or moving a region always ends with a containment
recalculation for that entity.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from boxplan.domain.display import RecordedDisplay
from boxplan.domain.geometry import Region
from boxplan.engine.containment import ContainmentDelta
from boxplan.engine.propagation import DeltaPropagator
from boxplan.engine.store import Entity, EntityRegistry
from boxplan.infrastructure.database.engine import STATE_DIRNAME, init_database
from boxplan.infrastructure.graph.engine import GraphEngine
from boxplan.infrastructure.layout_loader import load_layout
from boxplan.infrastructure.snapshots import SnapshotStore
from boxplan.plugins.manager import PluginManager
from boxplan.rules.dispatch import RuleDispatcher
from boxplan.rules.library import RuleContext

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from boxplan.config.settings import BoxplanSettings
    from boxplan.domain.layout import LayoutDocument

logger = logging.getLogger(__name__)


class Board:
    """A live board: entities, their placements, and the rules attached to them."""

    def __init__(self, settings: BoxplanSettings) -> None:
        self._settings = settings
        self.registry = EntityRegistry()
        self.propagator = DeltaPropagator(self.registry)
        self.rules = RuleContext(
            registry=self.registry,
            schedule=settings.schedule,
            display=settings.display,
        )
        self.dispatcher = RuleDispatcher()
        self.graph = GraphEngine(self.registry)
        self._engine: Engine | None = None
        self._snapshots: SnapshotStore | None = None
        self._plugin_manager: PluginManager | None = None
        self._loaded = False

    @property
    def settings(self) -> BoxplanSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @property
    def engine(self) -> Engine:
        """SQLite engine for snapshots (created lazily on first access)."""
        if self._engine is None:
            self._engine = init_database(self._settings.root)
        return self._engine

    @property
    def snapshots(self) -> SnapshotStore:
        if self._snapshots is None:
            self._snapshots = SnapshotStore(self.engine)
        return self._snapshots

    def close(self) -> None:
        """Dispose the database engine, if one was opened."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._snapshots = None

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    @property
    def plugin_manager(self) -> PluginManager | None:
        return self._plugin_manager

    def init_plugins(self, plugin_manager: PluginManager | None = None) -> list[str]:
        """Load plugins and register their custom rule handlers.

        Call before :meth:`build` so layouts may reference custom rules.
        Returns the loaded plugin names.
        """
        if plugin_manager is None:
            plugin_manager = PluginManager()
            local_dir = self._settings.root / STATE_DIRNAME / "plugins"
            if self._settings.plugins.local.get("enabled", True):
                plugin_manager.discover_and_load(local_dir=local_dir)
            else:
                plugin_manager.discover_and_load()
        self._plugin_manager = plugin_manager
        for name, handler in plugin_manager.collect_rule_handlers().items():
            self.dispatcher.register_custom(name, handler)
        return plugin_manager.list_plugin_names()

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Call a plugin hook synchronously. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugin_manager is None:
            return
        try:
            getattr(self._plugin_manager.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    # ------------------------------------------------------------------
    # Construction from a layout
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> list[str]:
        """Build the board from the configured layout file and latest snapshot.

        Raises :class:`LayoutError` when the layout cannot be read.
        Idempotent: a loaded board is returned as is.
        """
        if self._loaded:
            return []
        document = load_layout(self._settings.resolved_layout)
        overrides = self.snapshots.latest() if self._settings.board.snapshots else {}
        warnings = self.build(document, overrides=overrides)
        return warnings

    def build(
        self,
        document: LayoutDocument,
        *,
        overrides: dict[str, list[Region]] | None = None,
    ) -> list[str]:
        """Register every declared entity, attach rules, then place regions.

        Placements in *overrides* (typically the latest snapshot) replace the
        declared regions of the same entity id. Ids in *overrides* that the
        layout does not declare are ignored. Custom rule names are checked
        before anything is registered, so an :class:`UnknownRuleError` leaves
        the registry empty. Returns collected warnings.
        """
        overrides = overrides or {}
        warnings: list[str] = []
        planned: dict[str, list[Region]] = {}

        for spec in document.entities:
            self.dispatcher.validate(spec.rules)

        for spec in document.entities:
            regions = planned[spec.id] = list(overrides.get(spec.id, spec.regions))
            entity = self.registry.add(Entity(spec.id, spec.type))
            entity.displays = [RecordedDisplay() for _ in regions]
            for name, value in spec.properties.items():
                entity.assign(name, value)
            self.dispatcher.apply(self.rules, entity, spec.rules)

        for spec in document.entities:
            self.place(spec.id, planned[spec.id], warnings=warnings)
        self._loaded = True

        unknown = sorted(set(overrides) - {spec.id for spec in document.entities})
        if unknown:
            logger.debug("Ignoring saved placements for undeclared ids: %s", unknown)
        return warnings

    # ------------------------------------------------------------------
    # Geometry input
    # ------------------------------------------------------------------

    def entity(self, entity_id: str) -> Entity:
        return self.registry.get(entity_id)

    def place(
        self,
        entity_id: str,
        regions: list[Region],
        *,
        warnings: list[str] | None = None,
    ) -> ContainmentDelta:
        """Replace all regions of *entity_id* and recalculate containment."""
        entity = self.registry.get(entity_id)
        entity.regions = list(regions)
        self._sync_displays(entity)
        return self.recalculate(entity_id, warnings=warnings)

    def move_region(
        self,
        entity_id: str,
        index: int,
        region: Region,
        *,
        warnings: list[str] | None = None,
    ) -> ContainmentDelta:
        """Replace region *index* of *entity_id* and recalculate containment.

        Raises ``IndexError`` if the entity has no region at *index*.
        """
        entity = self.registry.get(entity_id)
        if not 0 <= index < len(entity.regions):
            msg = f"'{entity_id}' has {len(entity.regions)} region(s); no index {index}"
            raise IndexError(msg)
        entity.regions[index] = region
        return self.recalculate(entity_id, warnings=warnings)

    def recalculate(
        self,
        entity_id: str,
        *,
        warnings: list[str] | None = None,
    ) -> ContainmentDelta:
        """Run containment for *entity_id*; notify plugins when it changed anything."""
        delta = self.propagator.recalculate(entity_id)
        if not delta.is_empty:
            self.graph.invalidate()
            self._dispatch_event(
                "post_recalculate",
                {
                    "entity_id": entity_id,
                    "parents": dict(delta.parents),
                    "children": dict(delta.children),
                },
                warnings if warnings is not None else [],
            )
        return delta

    def placements(self) -> dict[str, list[Region]]:
        """Current rectangles per entity id, in registry order."""
        return {entity.id: list(entity.regions) for entity in self.registry}

    def save_snapshot(self, *, warnings: list[str] | None = None) -> int:
        """Persist the current placements. Returns the snapshot id."""
        placements = self.placements()
        snapshot_id = self.snapshots.save(placements)
        self._dispatch_event(
            "post_save",
            {"snapshot_id": snapshot_id, "entity_count": len(placements)},
            warnings if warnings is not None else [],
        )
        return snapshot_id

    @staticmethod
    def _sync_displays(entity: Entity) -> None:
        # One display per region; new ones start from the entity's current look.
        missing = len(entity.regions) - len(entity.displays)
        if missing > 0:
            template = entity.displays[0] if entity.displays else None
            for _ in range(missing):
                display = RecordedDisplay()
                if isinstance(template, RecordedDisplay):
                    display.set_text(template.text)
                    display.set_color(template.color)
                entity.displays.append(display)
        elif missing < 0:
            del entity.displays[len(entity.regions) :]
