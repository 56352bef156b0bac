"""Alembic environment: async migration runner for the store_snapshots table.

Invariants:
    - The database URL comes from insight.config Settings (DATABASE_URL or the
      SQLite default), so migrations and the app always target the same database
    - Base.metadata populated from insight.models before autogenerate

Design Decisions:
    - render_as_batch on SQLite: ALTER TABLE support there is partial
    - The app also runs create_all on startup; migrations are for managed
      databases where schema changes are reviewed
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from insight.config import get_settings
from insight.db.base import Base
import insight.models  # noqa: F401  (populate Base.metadata)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
_DATABASE_URL = get_settings().database_url
_IS_SQLITE = _DATABASE_URL.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL without a connection."""
    context.configure(
        url=_DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_IS_SQLITE,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=_IS_SQLITE,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = _DATABASE_URL
    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
