"""Collection Persistence: durable save/load of one store's collection under its key.

Invariants:
    - save() writes the whole collection snapshot; failure raises PersistenceError
      (never swallowed: the store turns it into a warning)
    - load() never raises: no prior state, unreadable medium, or corrupt
      snapshot all degrade to an empty collection with a logged warning
    - Timestamps converted by the snapshot codec on both sides
"""

import logging
from typing import Sequence

from insight.core.collection_snapshot import (
    collection_from_snapshot, collection_to_snapshot,
)
from insight.core.entity_factory import Entity
from insight.core.errors import PersistenceError, SnapshotDecodeError
from insight.core.repository_protocols import KeyValueStorage

logger = logging.getLogger(__name__)


class CollectionPersistence:
    """Persistence adapter bound to one storage key."""

    def __init__(self, storage: KeyValueStorage, storage_key: str):
        self.storage = storage
        self.storage_key = storage_key

    async def save(self, entities: Sequence[Entity]) -> None:
        snapshot = collection_to_snapshot(entities)
        try:
            await self.storage.set(self.storage_key, snapshot)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(str(e), "write") from e
        logger.debug(
            "Collection saved",
            extra={"path": self.storage_key, "collection_size": len(entities)},
        )

    async def load(self) -> list[Entity]:
        try:
            raw = await self.storage.get(self.storage_key)
        except Exception as e:
            logger.warning(
                f"Could not read stored collection, starting empty: {e}",
                extra={"path": self.storage_key},
            )
            return []
        if raw is None:
            return []
        try:
            entities = collection_from_snapshot(raw)
        except SnapshotDecodeError as e:
            logger.warning(
                f"{e.message}; starting empty",
                extra={"path": self.storage_key, "error_code": e.code},
            )
            return []
        logger.info(
            "Collection restored",
            extra={"path": self.storage_key, "collection_size": len(entities)},
        )
        return entities
