"""Database engine setup for SQLite with WAL mode.

The DB is stored at {root}/.boxplan/boxplan.db and accessed through
SQLAlchemy Core.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from boxplan.infrastructure.database.schema import metadata

STATE_DIRNAME = ".boxplan"
DB_FILENAME = "boxplan.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(root: Path) -> Engine:
    """Initialize the snapshot database at ``{root}/.boxplan/boxplan.db``.

    Creates the ``.boxplan/`` directory (and its ``plugins/`` folder) and
    all tables from :data:`schema.metadata`.

    Idempotent: safe to call on an existing board.
    """
    state_dir = root / STATE_DIRNAME
    state_dir.mkdir(parents=True, exist_ok=True)
    (state_dir / "plugins").mkdir(exist_ok=True)

    engine = create_db_engine(state_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
