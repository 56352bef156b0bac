"""Store Snapshot ORM: one row per store holding its serialized collection.

Invariants:
    - key is the primary key (store storage key, e.g. "feature-analysis-storage")
    - value holds the full snapshot text; writes replace it (last-write-wins)
    - updated_at refreshed on every write

Design Decisions:
    - Key/value row over one table per domain: the core only needs get/set by
      key, and new domains need no migration
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from insight.db.base import Base


class StoreSnapshot(Base):
    """Durable copy of one store's collection."""
    __tablename__ = "store_snapshots"

    key: Mapped[str] = mapped_column(String(120), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
