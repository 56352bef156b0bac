"""ORM Models: SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all

Design Decisions:
    - One file per table for locality
"""

from insight.models.store_snapshot import StoreSnapshot  # noqa: F401
