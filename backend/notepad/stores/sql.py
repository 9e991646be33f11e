"""
Notepad Backend: SQL Table Note Store
=======================================

What:  Persists notes in a single `notes` table via async SQLAlchemy.
How:   One engine per store instance; each operation runs in its own
       session scope (commit on success, rollback on error).
Who:   Selected by STORE_BACKEND=sql. The location comes from DB_FILE
       (SQLite via aiosqlite) or DATABASE_URL.

Store-level defaults:
    The `id` column default assigns the opaque identifier and the timestamp
    defaults stamp created_at/updated_at, so the store (not the caller)
    decides both. Rows come back in primary-key (insertion) order.

Failure Semantics:
    Every SQLAlchemyError is logged and re-raised as StoreError.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError

from notepad.database import Base, build_engine, build_session_factory, session_scope
from notepad.exceptions import StoreError
from notepad.models.note import Note
from notepad.schemas.note import NoteCreate, NoteResponse
from notepad.stores.base import NoteStore, apply_changes

logger = logging.getLogger(__name__)


class SqlNoteStore(NoteStore):
    """Table-backed note store."""

    name = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine = build_engine(database_url, echo=echo)
        self._session_factory = build_session_factory(self.engine)

    def _fail(self, operation: str, error: SQLAlchemyError) -> StoreError:
        logger.error("Database error during %s: %s", operation, error)
        return StoreError(context={"operation": operation, "error_type": type(error).__name__})

    async def initialize(self) -> None:
        """Create the notes table if it does not exist yet."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise self._fail("initialize", e) from e
        logger.info("SQL note store ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("SQL store health check failed: %s", e)
            return False
        return True

    async def load_all(self) -> List[NoteResponse]:
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(select(Note).order_by(Note.seq))
                return [NoteResponse.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise self._fail("load_all", e) from e

    async def load_one(self, note_id: str) -> Optional[NoteResponse]:
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(select(Note).where(Note.id == note_id))
                row = result.scalar_one_or_none()
                return NoteResponse.model_validate(row) if row is not None else None
        except SQLAlchemyError as e:
            raise self._fail("load_one", e) from e

    async def insert(self, draft: NoteCreate) -> NoteResponse:
        try:
            async with session_scope(self._session_factory) as session:
                row = Note(title=draft.title, content=draft.content, tags=list(draft.tags))
                session.add(row)
                # Flush runs the column defaults and fills id/timestamps on the row
                await session.flush()
                note = NoteResponse.model_validate(row)
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e
        logger.debug("Inserted note %s", note.id)
        return note

    async def update(self, note_id: str, changes: Dict[str, Any]) -> Optional[NoteResponse]:
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(
                    select(Note).where(Note.id == note_id).with_for_update()
                )
                row = result.scalar_one_or_none()
                if row is None:
                    return None
                merged = apply_changes(NoteResponse.model_validate(row), changes)
                # Only the supplied columns go into the UPDATE statement
                for field in changes:
                    setattr(row, field, getattr(merged, field))
                row.updated_at = merged.updated_at
                await session.flush()
                await session.refresh(row)
                return NoteResponse.model_validate(row)
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e

    async def remove(self, note_id: str) -> bool:
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(delete(Note).where(Note.id == note_id))
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise self._fail("remove", e) from e
