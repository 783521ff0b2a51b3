"""Shared pytest fixtures and test helpers for boxplan tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from boxplan.config.settings import BoxplanSettings
from boxplan.domain.geometry import Region
from boxplan.engine.propagation import DeltaPropagator
from boxplan.engine.store import Entity, EntityRegistry
from boxplan.infrastructure.board import Board
from boxplan.infrastructure.database.engine import init_database
from boxplan.rules.library import RuleContext
from boxplan.services.telemetry import disable_telemetry

# A small planning board: two quarters, three classes.
# Fall holds MATH 19 and MATH 20 (6 units against a limit of 5);
# Winter holds CS 106A (5 units against a limit of 22).
SAMPLE_LAYOUT = """\
[[entities]]
id = "Fall 2022-23"
type = "quarter"
rules = [
    { kind = "units" },
    { kind = "unit-max", limit = 5 },
    { kind = "error-color" },
    { kind = "display-text" },
]
regions = [{ left_top = [0, 0], right_bottom = [100, 100] }]

[[entities]]
id = "Winter 2022-23"
type = "quarter"
rules = [{ kind = "units" }, { kind = "unit-max", limit = 22 }]
regions = [{ left_top = [200, 0], right_bottom = [300, 100] }]

[[entities]]
id = "MATH 19"
type = "class"
properties = { units = 3 }
rules = [{ kind = "taken-at-most-once" }, { kind = "display-text" }]
regions = [{ left_top = [10, 10], right_bottom = [40, 30] }]

[[entities]]
id = "MATH 20"
type = "class"
properties = { units = 3 }
rules = [{ kind = "taken-at-most-once" }]
regions = [{ left_top = [10, 40], right_bottom = [40, 60] }]

[[entities]]
id = "CS 106A"
type = "class"
properties = { units = 5 }
rules = [{ kind = "taken-at-most-once" }]
regions = [{ left_top = [210, 10], right_bottom = [240, 30] }]
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's BOXPLAN_* environment out of tests."""
    for name in ("BOXPLAN_CONFIG", "BOXPLAN_VERBOSE", "BOXPLAN_JSON_OUTPUT", "BOXPLAN_QUIET"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Undo ``-v`` invocations that switch span collection on."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


# ---------------------------------------------------------------------------
# Engine-level helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> EntityRegistry:
    return EntityRegistry()


@pytest.fixture
def propagator(registry: EntityRegistry) -> DeltaPropagator:
    return DeltaPropagator(registry)


@pytest.fixture
def rules(registry: EntityRegistry) -> RuleContext:
    return RuleContext(registry=registry)


@pytest.fixture
def add(registry: EntityRegistry) -> Callable[..., Entity]:
    """Register an entity: ``add("MATH 19", "class", region, units=3)``."""

    def _add(entity_id: str, entity_type: str, *regions: Region, **props: object) -> Entity:
        entity = registry.add(Entity(entity_id, entity_type))
        for name, value in props.items():
            entity.assign(name, value)
        entity.regions = list(regions)
        return entity

    return _add


@pytest.fixture
def place(propagator: DeltaPropagator, registry: EntityRegistry) -> Callable[..., None]:
    """Set an entity's regions and recalculate containment for it."""

    def _place(entity_id: str, *regions: Region) -> None:
        registry.get(entity_id).regions = list(regions)
        propagator.recalculate(entity_id)

    return _place


# ---------------------------------------------------------------------------
# Board-level helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def board_root(tmp_path: Path) -> Path:
    """Temporary board directory holding ``layout.toml``."""
    (tmp_path / "layout.toml").write_text(SAMPLE_LAYOUT, encoding="utf-8")
    return tmp_path


@pytest.fixture
def board(board_root: Path) -> Generator[Board]:
    """Board over the sample layout, not yet loaded."""
    settings = BoxplanSettings.from_cli(root=board_root)
    b = Board(settings)
    try:
        yield b
    finally:
        b.close()


@pytest.fixture
def loaded_board(board: Board) -> Board:
    board.load()
    return board


@pytest.fixture
def _isolated_board(board_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp board so the CLI finds ``layout.toml`` there."""
    monkeypatch.chdir(board_root)
