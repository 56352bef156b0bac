"""SQL Key-Value Storage: the durable medium behind every store's persistence adapter.

Invariants:
    - get(key) returns the last value set for key, or None
    - set(key, value) replaces the row (last-write-wins), committed before returning
    - Failures surface as PersistenceError (mapped by DatabaseSessionManager)
"""

import logging

from sqlalchemy import select

from insight.infrastructure.database import DatabaseSessionManager
from insight.models.store_snapshot import StoreSnapshot

logger = logging.getLogger(__name__)


class SqlKeyValueStorage:
    """KeyValueStorage over the store_snapshots table."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def get(self, key: str) -> str | None:
        async with self._db.session() as session:
            result = await session.execute(
                select(StoreSnapshot.value).where(StoreSnapshot.key == key),
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self._db.session() as session:
            row = await session.get(StoreSnapshot, key)
            if row is None:
                session.add(StoreSnapshot(key=key, value=value))
            else:
                row.value = value
            await session.commit()
        logger.debug("Snapshot written", extra={"path": key})
