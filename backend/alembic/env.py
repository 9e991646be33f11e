"""
Alembic Migration Environment
===============================

What:  Configures Alembic to work with the async SQLAlchemy setup of the
       table-backed note store.
How:   Builds an async engine from the configured URL and runs migrations
       through connection.run_sync().
Who:   `alembic -c backend/alembic.ini upgrade head`, and the migration test.

URL resolution:
    sqlalchemy.url from the Alembic config when it is set, otherwise
    settings.resolved_database_url (DATABASE_URL or DB_FILE).
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from notepad.config import settings
from notepad.database import Base

# Import all models so Alembic can detect them for --autogenerate
from notepad.models.note import Note  # noqa: F401

config = context.config

# Callers that manage logging themselves (tests) set configure_logger=False
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.resolved_database_url)


def run_migrations_offline() -> None:
    """Emit migration SQL without connecting to the database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an async engine and apply pending migrations."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
