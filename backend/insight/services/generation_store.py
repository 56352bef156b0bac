"""Generation Store: one domain's entity collection and its generation pipeline.

Invariants:
    - submit: build request -> generate -> validate -> normalize -> create ->
      prepend -> persist, then loading clears (durability precedes completion)
    - Transport/parse/schema failures never escape submit(): they set `error`,
      keep the collection unchanged, preserve the form as `draft`, and publish
      exactly one error notification
    - is_loading is true exactly while at least one generation is in flight
    - remove of an absent id is a no-op; a present id is removed and persisted
    - Persistence write failure is a warning: in-memory collection stays authoritative
    - Saves are serialized and snapshot the collection inside the lock, so the
      last write always holds the latest collection

Design Decisions:
    - Explicit instance with injected client, persistence, notifier, clock and
      id source: no module-level singletons, isolated tests, many stores per process
    - Overlapping submits governed by SubmitPolicy (allow | reject | queue);
      allow matches the dashboard: completion order wins
    - Validator outcome matched as Ok/Err; only the transport call raises
"""

import asyncio
import logging
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from insight.core.build_request import build_generation_request
from insight.core.collection import find_entity, prepend_entity, remove_entity
from insight.core.domain_types import (
    EntityId, NotificationLevel, StoreStatus, SubmitPolicy,
)
from insight.core.entity_factory import (
    Entity, create_entity, new_entity_id, utc_now,
)
from insight.core.errors import (
    ErrorContext, GenerationInFlightError, InsightError, ParseError,
    PersistenceError, SchemaError, TransportError,
)
from insight.core.normalize_ranges import normalize_payload
from insight.core.repository_protocols import GenerationClient, Notifier
from insight.core.result import Err, Ok
from insight.core.shape import DomainDescriptor
from insight.core.validate_payload import validate_payload
from insight.services.persistence_adapter import CollectionPersistence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreState:
    """Read-only view handed to the presentation layer."""
    entities: tuple[Entity, ...]
    is_loading: bool
    error: str | None
    status: StoreStatus
    draft: dict[str, Any] | None
    warning: str | None


class GenerationStore:
    """Validated-generation store for one domain descriptor."""

    def __init__(
        self,
        descriptor: DomainDescriptor,
        client: GenerationClient,
        persistence: CollectionPersistence,
        notifier: Notifier,
        *,
        policy: SubmitPolicy = SubmitPolicy.ALLOW,
        clock: Callable[[], datetime] = utc_now,
        new_id: Callable[[], EntityId] = new_entity_id,
    ):
        self.descriptor = descriptor
        self.client = client
        self.persistence = persistence
        self.notifier = notifier
        self.policy = policy
        self._clock = clock
        self._new_id = new_id

        self._entities: list[Entity] = []
        self._in_flight = 0
        self._queue_lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()
        self.error: str | None = None
        self.last_failure: InsightError | None = None
        self.warning: str | None = None
        self.draft: dict[str, Any] | None = None

    # ─── Read side ──────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def status(self) -> StoreStatus:
        if self._in_flight:
            return StoreStatus.GENERATING
        if self.error is not None:
            return StoreStatus.ERROR
        return StoreStatus.IDLE

    def state(self) -> StoreState:
        return StoreState(
            entities=self.entities,
            is_loading=self.is_loading,
            error=self.error,
            status=self.status,
            draft=dict(self.draft) if self.draft is not None else None,
            warning=self.warning,
        )

    # ─── Lifecycle ──────────────────────────────────────────────

    async def hydrate(self) -> None:
        """Restore the persisted collection (empty on missing or corrupt state)."""
        self._entities = await self.persistence.load()

    async def submit(self, form_input: Mapping[str, Any]) -> Entity | None:
        """Run one generation. Returns the new entity, or None when it failed."""
        if self.policy is SubmitPolicy.REJECT and self._in_flight:
            raise GenerationInFlightError(self.name)
        gate = self._queue_lock if self.policy is SubmitPolicy.QUEUE else nullcontext()
        self._in_flight += 1
        try:
            async with gate:
                return await self._run(dict(form_input))
        finally:
            self._in_flight -= 1

    async def remove(self, entity_id: str) -> bool:
        """Delete by id; True when something was removed."""
        if find_entity(self._entities, entity_id) is None:
            return False
        self._entities = remove_entity(self._entities, entity_id)
        logger.info(
            "Entity removed", extra={"domain": self.name, "entity_id": entity_id},
        )
        await self._persist()
        return True

    def clear_error(self) -> None:
        self.error = None
        self.last_failure = None

    # ─── Pipeline ───────────────────────────────────────────────

    async def _run(self, form_input: dict[str, Any]) -> Entity | None:
        self.error = None
        self.last_failure = None
        request = build_generation_request(self.descriptor, form_input)
        try:
            raw = await self.client.generate(
                request, context=ErrorContext(domain=self.name),
            )
        except TransportError as e:
            self._record_failure(e, form_input)
            return None

        match validate_payload(raw, self.descriptor):
            case Err(error=error):
                self._record_failure(error, form_input)
                return None
            case Ok(value=payload):
                entity = create_entity(
                    form_input,
                    normalize_payload(payload, self.descriptor),
                    clock=self._clock,
                    new_id=self._new_id,
                )

        self._entities = prepend_entity(self._entities, entity)
        self.draft = None
        await self._persist()
        logger.info(
            "Entity created",
            extra={
                "domain": self.name, "entity_id": entity.id,
                "collection_size": len(self._entities),
            },
        )
        self.notifier.publish(
            NotificationLevel.SUCCESS,
            self.descriptor.success_message
            or f"{self.descriptor.title} completed successfully!",
            self.name,
        )
        return entity

    def _record_failure(
        self, error: TransportError | ParseError | SchemaError,
        form_input: dict[str, Any],
    ) -> None:
        error.context.domain = self.name
        self.error = error.message
        self.last_failure = error
        self.draft = form_input
        logger.warning(
            f"Generation failed: {error.message}",
            extra={"domain": self.name, "error_code": error.code},
        )
        self.notifier.publish(NotificationLevel.ERROR, error.message, self.name)

    async def _persist(self) -> None:
        async with self._save_lock:
            try:
                await self.persistence.save(self._entities)
            except PersistenceError as e:
                self.warning = (
                    f"{e.message}. Changes are kept for this session only."
                )
                logger.warning(
                    self.warning,
                    extra={"domain": self.name, "error_code": e.code},
                )
                self.notifier.publish(
                    NotificationLevel.WARNING, self.warning, self.name,
                )
            else:
                self.warning = None
