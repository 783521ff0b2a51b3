"""SQLite snapshot database via SQLAlchemy Core."""

from boxplan.infrastructure.database.engine import create_db_engine, init_database
from boxplan.infrastructure.database.schema import metadata, region_snapshots, snapshots

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "region_snapshots",
    "snapshots",
]
