"""
Alembic environment for the subscriptions schema.

`alembic upgrade head` runs against DATABASE_URL from aboapp settings, the
same URL the API uses, so a deploy only configures it once. alembic.ini
carries logging config only.

Offline mode (`--sql`) renders the DDL for review before it is applied to
the Supabase Postgres database.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from aboapp.config import settings
from aboapp.database import Base
from aboapp.models.subscription import Subscription  # noqa: F401  (registers the table)

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

target_metadata = Base.metadata


def run_offline(url: str) -> None:
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_online(url: str) -> None:
    # one connection for the whole upgrade, no pool left behind
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline(settings.database_url)
else:
    asyncio.run(run_online(settings.database_url))
