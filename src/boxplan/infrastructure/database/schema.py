"""SQLAlchemy Core table definitions for the boxplan snapshot database.

One ``snapshots`` row per save; one ``region_snapshots`` row per entity
within it, holding that entity's rectangles as a JSON array of
``[[left, top], [right, bottom]]`` pairs.
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Index, Integer, MetaData, Table, Text

metadata = MetaData()

snapshots = Table(
    "snapshots",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("created", Text, nullable=False),
    Column("entity_count", Integer, nullable=False, default=0, server_default="0"),
)

region_snapshots = Table(
    "region_snapshots",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("snapshot_id", Integer, ForeignKey("snapshots.id"), nullable=False),
    Column("entity_id", Text, nullable=False),
    Column("regions", Text, nullable=False),  # JSON array
    Index("ix_region_snapshots_entity", "entity_id", "snapshot_id"),
)
