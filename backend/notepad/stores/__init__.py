"""
Notepad Backend: Note Stores
==============================

What:  Pluggable persistence backends for notes.

Store Inventory:
    - NoteStore (abstract): load-all / load-one / insert / update / remove
    - JsonFileNoteStore: whole collection in one JSON array file
    - SqlNoteStore: single `notes` table through async SQLAlchemy

`build_store(settings)` picks the backend named by STORE_BACKEND.
"""

from notepad.config import Settings
from notepad.stores.base import NoteStore
from notepad.stores.json_file import JsonFileNoteStore
from notepad.stores.sql import SqlNoteStore

__all__ = ["NoteStore", "JsonFileNoteStore", "SqlNoteStore", "build_store"]


def build_store(settings: Settings) -> NoteStore:
    """Instantiate the configured store. No I/O happens until initialize()."""
    if settings.store_backend == "sql":
        return SqlNoteStore(
            settings.resolved_database_url,
            echo=settings.log_level == "DEBUG",
        )
    return JsonFileNoteStore(settings.notes_file)
