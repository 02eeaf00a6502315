from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from shoot_scheduler.core.config import get_settings
from shoot_scheduler.db import models  # noqa: F401
from shoot_scheduler.db.base import Base

config = context.config

if config.config_file_name is not None:
    # Leave the application's loggers alone when migrations run in-process.
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def _database_url() -> str:
    """``sqlalchemy.url`` from the Alembic config wins over the app settings."""
    return config.get_main_option("sqlalchemy.url") or get_settings().database_url


def _sync_url(url: str) -> str:
    # Offline mode renders SQL only, so drop the async driver (asyncpg, aiosqlite).
    parsed = make_url(url)
    return parsed.set(drivername=parsed.get_backend_name()).render_as_string(hide_password=False)


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=make_url(_database_url()).get_backend_name() == "sqlite",
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(
        url=_sync_url(_database_url()),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(_database_url(), poolclass=pool.NullPool)
    async with engine.begin() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
