"""Collection Snapshot: tests for persisting and restoring a collection.

Invariants:
    - Roundtrip preserves order, ids, inputs, analysis, extras and instants
    - Nested datetimes survive as native datetimes
    - Snapshot text contains no unencoded datetimes (plain JSON)
    - Corrupt or unknown snapshots raise SnapshotDecodeError
    - Duplicate ids in a snapshot keep the first occurrence
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from insight.core.collection_snapshot import (
    collection_from_snapshot, collection_to_snapshot,
)
from insight.core.entity_factory import Entity
from insight.core.errors import SnapshotDecodeError

_T0 = datetime(2025, 6, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)


def _collection() -> list[Entity]:
    return [
        Entity(
            id="b2",
            inputs={"project_name": "Apollo", "start_date": "2025-01-01"},
            analysis={
                "totalDuration": 90,
                "phases": [{
                    "name": "Build",
                    "startDate": datetime(2025, 1, 1, tzinfo=timezone.utc),
                    "milestones": [{"endDate": datetime(2025, 2, 1, tzinfo=timezone.utc)}],
                }],
            },
            recommendations=["Buffer two weeks"],
            created_at=_T0 + timedelta(seconds=5),
        ),
        Entity(
            id="a1",
            inputs={"industry": "Fintech", "competitors": ["Stripe"]},
            analysis={"marketSize": 1200.5},
            recommendations=[],
            created_at=_T0,
            extras={"competitors": [{"name": "Stripe", "marketShare": 35}]},
        ),
    ]


def test_roundtrip_preserves_everything():
    original = _collection()
    restored = collection_from_snapshot(collection_to_snapshot(original))
    assert restored == original


def test_nested_datetimes_restored_native():
    restored = collection_from_snapshot(collection_to_snapshot(_collection()))
    phase = restored[0].analysis["phases"][0]
    assert isinstance(phase["startDate"], datetime)
    assert isinstance(phase["milestones"][0]["endDate"], datetime)


def test_snapshot_is_plain_json():
    data = json.loads(collection_to_snapshot(_collection()))
    assert data["version"] == 1
    assert data["entities"][0]["created_at"] == "2025-06-01T12:00:05.123456+00:00"
    assert data["entities"][0]["analysis"]["phases"][0]["startDate"] == {
        "$timestamp": "2025-01-01T00:00:00.000000+00:00",
    }


def test_date_like_strings_stay_strings():
    restored = collection_from_snapshot(collection_to_snapshot(_collection()))
    assert restored[0].inputs["start_date"] == "2025-01-01"


def test_empty_collection_roundtrip():
    assert collection_from_snapshot(collection_to_snapshot([])) == []


@pytest.mark.parametrize("text", [
    "not json",
    "[]",
    '{"version": 1}',
    '{"version": 2, "entities": []}',
    '{"version": 1, "entities": [{"id": "x"}]}',
    '{"version": 1, "entities": [{"id": "x", "analysis": {}, '
    '"recommendations": [], "created_at": "yesterday"}]}',
])
def test_corrupt_snapshot_rejected(text):
    with pytest.raises(SnapshotDecodeError):
        collection_from_snapshot(text)


def test_duplicate_ids_keep_first():
    entities = _collection()
    data = json.loads(collection_to_snapshot(entities))
    dup = dict(data["entities"][1], analysis={"marketSize": 1})
    data["entities"].append(dup)
    restored = collection_from_snapshot(json.dumps(data))
    assert [e.id for e in restored] == ["b2", "a1"]
    assert restored[1].analysis == {"marketSize": 1200.5}
