"""Notification Feed: transient user-facing notifications (the dashboard's toasts).

Invariants:
    - Bounded: oldest notifications dropped once the buffer is full
    - drain() returns pending notifications oldest first and empties the feed
    - Every publish is also logged at the matching level
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

from insight.core.domain_types import NotificationLevel

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    domain: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationFeed:
    """In-memory Notifier implementation shared by all stores."""

    def __init__(self, maxlen: int = 100):
        self._pending: deque[Notification] = deque(maxlen=maxlen)

    def publish(self, level: NotificationLevel, message: str, domain: str) -> None:
        self._pending.append(Notification(level, message, domain))
        logger.log(_LOG_LEVELS[level], message, extra={"domain": domain})

    def pending(self) -> list[Notification]:
        return list(self._pending)

    def drain(self) -> list[Notification]:
        items = list(self._pending)
        self._pending.clear()
        return items
