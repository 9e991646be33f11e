"""
Notepad Backend: Database Engine & Session Management
=======================================================

What:  Async SQLAlchemy engine construction, session factory, and a
       transactional session scope for the table-backed note store.
How:   The SQL store builds one engine per instance from a URL; every store
       call opens a session scope that commits on success and rolls back
       on error.
Who:   Used by SqlNoteStore and by Alembic (through `Base.metadata`).

Engine Notes:
    The default URL is SQLite through the aiosqlite driver
    (sqlite+aiosqlite:///./data.sqlite). Any async URL works, e.g.
    postgresql+asyncpg://... when the `postgres` extra is installed.
    Pool sizing arguments are only passed to server databases; SQLite
    connections are cheap and file-local.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with one shared metadata object, which Alembic reads
    for migrations and SqlNoteStore uses to create missing tables.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Args:
        database_url: Async SQLAlchemy URL
        echo: Log every SQL statement (enabled when LOG_LEVEL=DEBUG)
    """
    kwargs = {"echo": echo}
    if not database_url.startswith("sqlite"):
        kwargs.update(pool_size=5, max_overflow=5, pool_pre_ping=True, pool_recycle=3600)
    return create_async_engine(database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to an engine.

    expire_on_commit=False keeps loaded attributes readable after commit,
    so stores can build response models outside the transaction.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Session Scope ─────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Provide a transactional session.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller (the caller performs queries)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)

    Example:
        async with session_scope(factory) as session:
            session.add(Note(content="hello"))
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
