"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Every store dependency (client, storage, notifier) is a Protocol,
      injected at construction

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no base class
    - Async where the implementation does IO (generation, storage); the
      notifier is sync because publishing is an in-memory append
"""

from typing import Protocol

from insight.core.build_request import GenerationRequest
from insight.core.domain_types import NotificationLevel
from insight.core.errors import ErrorContext


class GenerationClient(Protocol):
    """Performs one request/response exchange with the inference service.

    Returns the raw completion text or raises TransportError.
    """
    async def generate(
        self, request: GenerationRequest, context: ErrorContext | None = None,
    ) -> str: ...


class KeyValueStorage(Protocol):
    """Durable string-by-key medium, last-write-wins per key.

    Raises PersistenceError when the medium fails.
    """
    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...


class Notifier(Protocol):
    """Transient user-facing notifications (the dashboard's toasts)."""
    def publish(self, level: NotificationLevel, message: str, domain: str) -> None: ...
