"""Durable snapshots of entity placements.

A snapshot records, per entity id, the list of that entity's current
rectangles. When a board is rebuilt, the most recently saved rectangles
for each id override the placements declared in the layout. Rows that no
longer parse are logged and ignored so the declared placement is used.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import func, insert, select

from boxplan.domain.geometry import Region
from boxplan.infrastructure.database.schema import region_snapshots, snapshots

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Snapshot persistence over the board's SQLite engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def save(self, placements: Mapping[str, list[Region]]) -> int:
        """Persist one snapshot of *placements*. Returns the snapshot id."""
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(snapshots).values(
                    created=datetime.now(UTC).isoformat(),
                    entity_count=len(placements),
                )
            )
            snapshot_id = result.inserted_primary_key[0]
            rows = [
                {
                    "snapshot_id": snapshot_id,
                    "entity_id": entity_id,
                    "regions": json.dumps([region.to_list() for region in regions]),
                }
                for entity_id, regions in placements.items()
            ]
            if rows:
                conn.execute(insert(region_snapshots), rows)
        logger.debug("Saved snapshot %s with %d entities", snapshot_id, len(placements))
        return int(snapshot_id)

    def latest(self) -> dict[str, list[Region]]:
        """Most recently saved rectangles per entity id.

        Malformed rows are skipped with a warning.
        """
        newest = (
            select(
                region_snapshots.c.entity_id,
                func.max(region_snapshots.c.snapshot_id).label("snapshot_id"),
            )
            .group_by(region_snapshots.c.entity_id)
            .subquery()
        )
        query = select(region_snapshots.c.entity_id, region_snapshots.c.regions).join(
            newest,
            (region_snapshots.c.entity_id == newest.c.entity_id)
            & (region_snapshots.c.snapshot_id == newest.c.snapshot_id),
        )

        placements: dict[str, list[Region]] = {}
        with self._engine.connect() as conn:
            for row in conn.execute(query):
                regions = _parse_regions(row.entity_id, row.regions)
                if regions is not None:
                    placements[row.entity_id] = regions
        return placements

    def count(self) -> int:
        """Number of snapshots saved so far."""
        with self._engine.connect() as conn:
            return int(conn.execute(select(func.count()).select_from(snapshots)).scalar_one())


def _parse_regions(entity_id: str, raw: str) -> list[Region] | None:
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            msg = f"expected a list, got {type(data).__name__}"
            raise ValueError(msg)
        return [Region.from_list(item) for item in data]
    except (ValueError, TypeError, ValidationError) as exc:
        logger.warning("Ignoring malformed snapshot for %s: %s", entity_id, exc)
        return None
