"""Tests for the SQLite engine and snapshot schema."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from boxplan.infrastructure.database.engine import DB_FILENAME, STATE_DIRNAME, init_database


class TestInitDatabase:
    def test_creates_state_dir(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        try:
            assert (tmp_path / STATE_DIRNAME / DB_FILENAME).is_file()
            assert (tmp_path / STATE_DIRNAME / "plugins").is_dir()
        finally:
            engine.dispose()

    def test_tables_exist(self, db_engine: Engine) -> None:
        names = set(inspect(db_engine).get_table_names())
        assert {"snapshots", "region_snapshots"} <= names

    def test_wal_mode(self, db_engine: Engine) -> None:
        with db_engine.connect() as conn:
            mode = conn.execute(text("PRAGMA journal_mode")).scalar_one()
        assert mode.lower() == "wal"

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path).dispose()
        init_database(tmp_path).dispose()
