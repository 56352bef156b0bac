"""Collection Persistence + SQL Key-Value Storage: tests for durable save/load.

Invariants:
    - save → load roundtrip equals the saved collection (order, ids, instants)
    - load with no prior state, unreadable medium, or corrupt snapshot → []
    - save failure raises PersistenceError(operation="write")
    - SqlKeyValueStorage is last-write-wins per key, keys isolated
"""

from datetime import datetime, timezone

import pytest

from insight.core.entity_factory import Entity
from insight.core.errors import PersistenceError
from insight.infrastructure.key_value_storage import SqlKeyValueStorage
from insight.services.persistence_adapter import CollectionPersistence

from tests.services.fakes import FailingStorage, MemoryStorage, UnreadableStorage

_KEY = "feature-analysis-storage"


def _entities():
    return [
        Entity(
            id=f"id-{n}",
            inputs={"name": f"Feature {n}"},
            analysis={"impact": 50 + n},
            recommendations=["r"],
            created_at=datetime(2025, 1, n + 1, 8, 30, tzinfo=timezone.utc),
        )
        for n in range(3)
    ]


async def test_roundtrip_memory():
    persistence = CollectionPersistence(MemoryStorage(), _KEY)
    await persistence.save(_entities())
    assert await persistence.load() == _entities()


async def test_roundtrip_sql(db):
    persistence = CollectionPersistence(SqlKeyValueStorage(db), _KEY)
    await persistence.save(_entities())
    restored = await persistence.load()
    assert restored == _entities()
    assert restored[0].created_at.tzinfo is not None


async def test_load_without_state_is_empty(db):
    persistence = CollectionPersistence(SqlKeyValueStorage(db), _KEY)
    assert await persistence.load() == []


async def test_load_corrupt_snapshot_is_empty():
    storage = MemoryStorage({_KEY: "{not json"})
    assert await CollectionPersistence(storage, _KEY).load() == []


async def test_load_unreadable_medium_is_empty():
    storage = UnreadableStorage({_KEY: "{}"})
    assert await CollectionPersistence(storage, _KEY).load() == []


async def test_save_failure_raises_persistence_error():
    persistence = CollectionPersistence(FailingStorage(), _KEY)
    with pytest.raises(PersistenceError) as exc:
        await persistence.save(_entities())
    assert exc.value.operation == "write"
    assert "disk full" in exc.value.message


async def test_sql_last_write_wins(db):
    storage = SqlKeyValueStorage(db)
    await storage.set(_KEY, "first")
    await storage.set(_KEY, "second")
    assert await storage.get(_KEY) == "second"


async def test_sql_keys_isolated(db):
    storage = SqlKeyValueStorage(db)
    await storage.set("risk-assessment-storage", "risk")
    await storage.set(_KEY, "feature")
    assert await storage.get("risk-assessment-storage") == "risk"
    assert await storage.get("missing") is None
