"""Collection Snapshot: serialization / deserialization for a store's entities.

Invariants:
    - collection_to_snapshot produces JSON text with no native datetimes:
      created_at via the timestamp codec, nested datetimes as {"$timestamp": iso}
    - collection_from_snapshot reverses both immediately, so in-memory entities
      only ever hold native datetimes
    - Order preserved; duplicate ids keep the first occurrence
    - Malformed input raises SnapshotDecodeError (callers decide to degrade)

Design Decisions:
    - Versioned envelope {"version": 1, "entities": [...]}: later formats
      can migrate instead of being misread
    - Nested timestamps tagged rather than guessed from string shape: a
      date-looking string the model produced stays a string
"""

import json
from datetime import datetime
from typing import Any, Sequence

from insight.core.domain_types import EntityId
from insight.core.entity_factory import Entity
from insight.core.errors import SnapshotDecodeError
from insight.core.timestamp_codec import decode_timestamp, encode_timestamp

SNAPSHOT_VERSION = 1
_TS_TAG = "$timestamp"


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return {_TS_TAG: encode_timestamp(value)}
    if isinstance(value, dict):
        return {k: _encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(v) for v in value]
    return value


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        if len(value) == 1 and _TS_TAG in value:
            return decode_timestamp(value[_TS_TAG])
        return {k: _decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode_value(v) for v in value]
    return value


def entity_to_dict(entity: Entity) -> dict:
    """JSON-safe dict for one entity. Pure, no IO."""
    return {
        "id": entity.id,
        "inputs": _encode_value(entity.inputs),
        "analysis": _encode_value(entity.analysis),
        "recommendations": list(entity.recommendations),
        "extras": _encode_value(entity.extras),
        "created_at": encode_timestamp(entity.created_at),
    }


def entity_from_dict(data: dict) -> Entity:
    """Rebuild an Entity from entity_to_dict output. Raises KeyError/ValueError/TypeError."""
    return Entity(
        id=EntityId(str(data["id"])),
        inputs=dict(_decode_value(data.get("inputs", {}))),
        analysis=dict(_decode_value(data["analysis"])),
        recommendations=list(data["recommendations"]),
        created_at=decode_timestamp(data["created_at"]),
        extras=dict(_decode_value(data.get("extras", {}))),
    )


def collection_to_snapshot(entities: Sequence[Entity]) -> str:
    """Serialize a collection to snapshot text."""
    return json.dumps(
        {
            "version": SNAPSHOT_VERSION,
            "entities": [entity_to_dict(e) for e in entities],
        },
        ensure_ascii=False,
    )


def collection_from_snapshot(text: str) -> list[Entity]:
    """Deserialize snapshot text. Raises SnapshotDecodeError when unreadable."""
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise SnapshotDecodeError(f"not JSON ({e.__class__.__name__})")
    if not isinstance(data, dict) or not isinstance(data.get("entities"), list):
        raise SnapshotDecodeError("missing entities list")
    if data.get("version") != SNAPSHOT_VERSION:
        raise SnapshotDecodeError(f"unsupported version {data.get('version')!r}")

    entities: list[Entity] = []
    seen: set[str] = set()
    for i, raw in enumerate(data["entities"]):
        try:
            entity = entity_from_dict(raw)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise SnapshotDecodeError(f"entity {i} invalid ({e.__class__.__name__}: {e})")
        if entity.id in seen:
            continue
        seen.add(entity.id)
        entities.append(entity)
    return entities
