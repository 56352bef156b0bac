"""Entity Factory: mints the persisted result of one successful generation.

Invariants:
    - id assigned once, here; uuid4 hex carries 122 random bits
    - created_at is an aware UTC datetime
    - Entity is frozen: no edit operation exists, replace = delete + recreate

Design Decisions:
    - clock and id source injected: the factory stays pure for tests and
      the store owns the side effects
    - Form fields kept under `inputs` rather than flattened beside `analysis`,
      so a form key can never shadow a reserved entity key
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from insight.core.domain_types import EntityId


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_entity_id() -> EntityId:
    return EntityId(uuid.uuid4().hex)


@dataclass(frozen=True)
class Entity:
    """One generated insight owned by exactly one store."""
    id: EntityId
    inputs: dict[str, Any]
    analysis: dict[str, Any]
    recommendations: list[str]
    created_at: datetime
    extras: dict[str, Any] = field(default_factory=dict)


def create_entity(
    inputs: Mapping[str, Any],
    payload: Mapping[str, Any],
    *,
    clock: Callable[[], datetime] = utc_now,
    new_id: Callable[[], EntityId] = new_entity_id,
) -> Entity:
    """Assemble an Entity from form input + a validated, normalized payload."""
    extras = {
        k: v for k, v in payload.items()
        if k not in ("analysis", "recommendations")
    }
    return Entity(
        id=new_id(),
        inputs=dict(inputs),
        analysis=dict(payload["analysis"]),
        recommendations=list(payload["recommendations"]),
        created_at=clock(),
        extras=extras,
    )
