"""Database Infrastructure: SQLAlchemy Base shared by the ORM models.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite by default, asyncpg for PostgreSQL: both native async drivers
"""
