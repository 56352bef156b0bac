"""Service test fixtures: fake generation client, storage fakes, stores, API client.

Invariants:
    - Every test gets fresh storage, a fresh feed, and a fresh fake client
    - The API client runs against app.state.registry built from the fakes

Design Decisions:
    - ASGITransport does not run the lifespan: the registry is installed by hand,
      so no Anthropic client or database is built for route tests
    - SQLite in-memory for SqlKeyValueStorage tests: fast, no external dependency
"""

import pytest
from httpx import ASGITransport, AsyncClient

import insight.infrastructure.database as db_module
from insight.core.domain_types import SubmitPolicy
from insight.infrastructure.database import DatabaseSessionManager
from insight.main import app
from insight.services.define_product_domains import FEATURE_ANALYSIS
from insight.services.domain_registry import ALL_DOMAINS
from insight.services.generation_store import GenerationStore
from insight.services.notifications import NotificationFeed
from insight.services.persistence_adapter import CollectionPersistence
from insight.services.store_registry import StoreRegistry

from tests.services.fakes import FakeGenerationClient, MemoryStorage


@pytest.fixture
def fake_client():
    return FakeGenerationClient()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def feed():
    return NotificationFeed()


@pytest.fixture
def make_store(fake_client, storage, feed):
    """Factory for a FEATURE_ANALYSIS store wired to the fakes."""
    def _make(policy=SubmitPolicy.ALLOW, storage_=None, descriptor=FEATURE_ANALYSIS):
        return GenerationStore(
            descriptor,
            fake_client,
            CollectionPersistence(storage_ or storage, descriptor.storage_key),
            feed,
            policy=policy,
        )
    return _make


@pytest.fixture
def store(make_store):
    return make_store()


@pytest.fixture
async def db():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
def registry(fake_client, storage, feed):
    return StoreRegistry(ALL_DOMAINS, fake_client, storage, feed)


@pytest.fixture
async def client(registry, db):
    """FastAPI test client against the fake-backed registry."""
    original_manager = db_module.db_manager
    db_module.db_manager = db
    app.state.registry = registry

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager
