"""Collection Ops: newest-first entity list with unique ids.

Invariants:
    - Order is insertion order, newest first (not sorted by created_at)
    - No duplicate ids; prepend refuses one
    - remove of an absent id is a no-op, not an error
    - Inputs never mutated: every op returns a new list
"""

from typing import Sequence

from insight.core.entity_factory import Entity
from insight.core.errors import DuplicateEntityError


def prepend_entity(collection: Sequence[Entity], entity: Entity) -> list[Entity]:
    if any(e.id == entity.id for e in collection):
        raise DuplicateEntityError(entity.id)
    return [entity, *collection]


def remove_entity(collection: Sequence[Entity], entity_id: str) -> list[Entity]:
    return [e for e in collection if e.id != entity_id]


def find_entity(collection: Sequence[Entity], entity_id: str) -> Entity | None:
    return next((e for e in collection if e.id == entity_id), None)
