"""
Notepad Backend: Note SQLAlchemy Model
========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by SqlNoteStore for CRUD operations and by Alembic.

Table Design:
    - seq: auto-incrementing integer primary key; only used for ordering,
      never exposed through the API
    - id: opaque public identifier (uuid4 hex), unique, assigned by a column default
    - title / content: text; content is NOT NULL
    - tags: JSON array of strings
    - created_at / updated_at: UTC timestamps; updated_at defaults to the
      same instant as created_at so a fresh row has created_at == updated_at

The helpers `new_note_id()` and `utcnow()` are shared by every component that
creates notes (both stores and the local-only sync layer).
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from notepad.database import Base


def new_note_id() -> str:
    """Opaque, collision-free note identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    DateTime column that always hands back timezone-aware UTC values.

    SQLite has no timezone storage, so values come back naive; they are
    re-tagged as UTC on load and normalised to UTC on bind.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def _same_as_created_at(context) -> datetime:
    # Column default for updated_at: reuse the created_at of the same INSERT
    return context.get_current_parameters()["created_at"]


class Note(Base):
    """
    A persisted note row.

    Lifecycle:
        1. Inserted by SqlNoteStore.insert() with defaults for id and timestamps
        2. Patched by SqlNoteStore.update(): only the supplied columns plus updated_at
        3. Hard-deleted by SqlNoteStore.remove(); no tombstone is kept
    """

    __tablename__ = "notes"

    seq: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Insertion order; never exposed",
    )

    id: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        nullable=False,
        default=new_note_id,
        comment="Opaque public identifier",
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    tags: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Trimmed, non-empty tag strings",
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=_same_as_created_at,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', updated_at='{self.updated_at}')>"
