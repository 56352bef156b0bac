"""Collection Ops: tests for prepend, remove, and find over entity lists.

Invariants:
    - prepend puts the newest first and refuses duplicate ids
    - remove deletes exactly the named id; absent id leaves the list equal
"""

from datetime import datetime, timezone

import pytest

from insight.core.collection import find_entity, prepend_entity, remove_entity
from insight.core.entity_factory import Entity
from insight.core.errors import DuplicateEntityError

_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _entity(entity_id: str) -> Entity:
    return Entity(
        id=entity_id, inputs={}, analysis={}, recommendations=[], created_at=_NOW,
    )


def test_prepend_newest_first():
    collection = prepend_entity([_entity("a")], _entity("b"))
    assert [e.id for e in collection] == ["b", "a"]


def test_prepend_does_not_mutate():
    original = [_entity("a")]
    prepend_entity(original, _entity("b"))
    assert [e.id for e in original] == ["a"]


def test_prepend_duplicate_rejected():
    with pytest.raises(DuplicateEntityError):
        prepend_entity([_entity("a")], _entity("a"))


def test_remove_exact():
    collection = [_entity("c"), _entity("b"), _entity("a")]
    assert [e.id for e in remove_entity(collection, "b")] == ["c", "a"]


def test_remove_absent_is_noop():
    collection = [_entity("b"), _entity("a")]
    assert remove_entity(collection, "zzz") == collection


def test_find_entity():
    collection = [_entity("b"), _entity("a")]
    assert find_entity(collection, "a").id == "a"
    assert find_entity(collection, "zzz") is None
