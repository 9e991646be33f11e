"""
Notepad Backend: Note Store Interface
=======================================

What:  Abstract contract every persistence backend implements.
How:   Async methods; records cross the boundary as NoteResponse models.
Who:   Implemented by JsonFileNoteStore and SqlNoteStore, consumed by NoteService.

Error contract:
    - Missing records are reported as None / False, never as exceptions
    - Any backend failure (I/O, malformed data, SQL error) raises StoreError
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from notepad.models.note import utcnow
from notepad.schemas.note import NoteCreate, NoteResponse


def apply_changes(note: NoteResponse, changes: Dict[str, Any]) -> NoteResponse:
    """
    The note with `changes` applied and a fresh updated_at.

    Coarse clocks can repeat a timestamp, so updated_at never goes backwards.
    """
    return note.model_copy(
        update={**changes, "updated_at": max(utcnow(), note.updated_at)}
    )


class NoteStore(ABC):
    """Durable mapping from note id to note."""

    #: Short backend name reported by /health
    name: str = "store"

    async def initialize(self) -> None:
        """Prepare the backend. Safe to call more than once."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Cheap reachability probe."""

    @abstractmethod
    async def load_all(self) -> List[NoteResponse]:
        """Every note, in store order."""

    @abstractmethod
    async def load_one(self, note_id: str) -> Optional[NoteResponse]:
        """The note with this id, or None."""

    @abstractmethod
    async def insert(self, draft: NoteCreate) -> NoteResponse:
        """
        Persist a new note.

        The store assigns the id and sets created_at == updated_at.
        """

    @abstractmethod
    async def update(self, note_id: str, changes: Dict[str, Any]) -> Optional[NoteResponse]:
        """
        Merge `changes` into the stored note and refresh updated_at.

        The read, merge and write happen as one unit, so two concurrent
        partial updates of the same note both survive. None if no such note.
        """

    @abstractmethod
    async def remove(self, note_id: str) -> bool:
        """Delete a note; True if something was removed."""
