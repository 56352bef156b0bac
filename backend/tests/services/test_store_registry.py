"""Store Registry: tests for per-domain store wiring and hydration.

Invariants:
    - One store per descriptor, each bound to its own storage key
    - Unknown domain → ResourceNotFoundError
    - hydrate_all restores every store from shared storage
"""

import pytest

from insight.core.errors import ResourceNotFoundError
from insight.services.domain_registry import ALL_DOMAINS
from insight.services.store_registry import StoreRegistry

from tests.services.fakes import FEATURE_FORM, feature_reply


def test_one_store_per_domain(registry):
    assert len(registry) == len(ALL_DOMAINS)
    assert registry.get("tech-stack").persistence.storage_key == "tech-stack-storage"


def test_unknown_domain(registry):
    with pytest.raises(ResourceNotFoundError) as exc:
        registry.get("horoscope")
    assert exc.value.http_status == 404


async def test_hydrate_all_restores_each_store(fake_client, storage, feed, registry):
    fake_client.outcomes = [feature_reply()]
    created = await registry.get("feature-analysis").submit(FEATURE_FORM)

    fresh = StoreRegistry(ALL_DOMAINS, fake_client, storage, feed)
    await fresh.hydrate_all()
    assert fresh.get("feature-analysis").entities == (created,)
    assert fresh.get("risk-assessment").entities == ()


def test_stores_share_feed(registry, feed):
    assert all(store.notifier is feed for store in registry)
