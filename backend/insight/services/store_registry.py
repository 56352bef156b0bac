"""Store Registry: one GenerationStore per domain, sharing client, storage and feed.

Invariants:
    - Exactly one store per descriptor name; each persists under its own storage key
    - get() raises ResourceNotFoundError for unknown domains
    - hydrate_all() restores every store before the API serves requests

Design Decisions:
    - Built once in the app lifespan and kept on app.state, not a module global
"""

import logging
from typing import Iterable

from insight.core.domain_types import SubmitPolicy
from insight.core.errors import ResourceNotFoundError
from insight.core.repository_protocols import GenerationClient, KeyValueStorage
from insight.core.shape import DomainDescriptor
from insight.services.generation_store import GenerationStore
from insight.services.notifications import NotificationFeed
from insight.services.persistence_adapter import CollectionPersistence

logger = logging.getLogger(__name__)


class StoreRegistry:
    """Holds the live stores of every registered domain."""

    def __init__(
        self,
        descriptors: Iterable[DomainDescriptor],
        client: GenerationClient,
        storage: KeyValueStorage,
        feed: NotificationFeed,
        policy: SubmitPolicy = SubmitPolicy.ALLOW,
    ):
        self.feed = feed
        self._stores: dict[str, GenerationStore] = {}
        for descriptor in descriptors:
            self._stores[descriptor.name] = GenerationStore(
                descriptor,
                client,
                CollectionPersistence(storage, descriptor.storage_key),
                feed,
                policy=policy,
            )

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self):
        return iter(self._stores.values())

    def get(self, name: str) -> GenerationStore:
        store = self._stores.get(name)
        if store is None:
            raise ResourceNotFoundError("Domain", name)
        return store

    async def hydrate_all(self) -> None:
        for store in self._stores.values():
            await store.hydrate()
        logger.info(
            f"Hydrated {len(self._stores)} stores",
            extra={
                "collection_size": sum(len(s.entities) for s in self._stores.values()),
            },
        )
