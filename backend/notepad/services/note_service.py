"""
Notepad Backend: Note Service (Business Logic)
================================================

What:  The five note operations: list, get, create, update, delete.
How:   Validates raw JSON payloads, turns "missing" into NotFoundError,
       applies update patches, and delegates persistence to a NoteStore.
Who:   Called by the notes route handlers; calls the store.

Rules enforced here:
    - create: `content` must be a non-empty string ("content is required")
    - update: only correctly typed supplied fields change; `content` may not
      be set to ""; updated_at always refreshes and never moves backwards
    - ids and timestamps sent by the client are ignored

Design Decision:
    NoteService is stateless: it receives the store for each call, so tests
    can hand it any NoteStore (real or mocked) and no state is shared
    between requests.
"""

import logging
from typing import Any, Dict, List

from notepad.exceptions import NotFoundError, ValidationError
from notepad.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from notepad.stores.base import NoteStore

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        Validation and not-found conditions are raised as ValidationError /
        NotFoundError and mapped to 4xx by the global handlers. StoreError
        from the backend propagates untouched (→ 500).
    """

    async def list_notes(self, store: NoteStore) -> List[NoteResponse]:
        return await store.load_all()

    async def get_note(self, store: NoteStore, note_id: str) -> NoteResponse:
        """
        Retrieve a single note by id.

        Raises:
            NotFoundError: no note with this id (→ 404)
        """
        note = await store.load_one(note_id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def create_note(self, store: NoteStore, payload: Dict[str, Any]) -> NoteResponse:
        """
        Create a note from a parsed JSON body.

        Args:
            store: Persistence backend
            payload: Decoded request body (a dict)

        Returns:
            The stored note, with store-assigned id and created_at == updated_at

        Raises:
            ValidationError: content missing, not a string, or empty (→ 400)
        """
        content = payload.get("content")
        if not isinstance(content, str) or not content:
            raise ValidationError(message="content is required", field="content")

        draft = NoteCreate.model_validate(payload)
        note = await store.insert(draft)
        logger.info("Created note %s", note.id)
        return note

    async def update_note(
        self, store: NoteStore, note_id: str, payload: Dict[str, Any]
    ) -> NoteResponse:
        """
        Apply a partial update.

        Only string-typed `title`/`content` and list/string `tags` are applied.
        Anything else in the body is ignored. The body is checked before the
        note is looked up, like every other malformed body, so an empty
        `content` is a 400 even for an unknown id.

        The merge itself happens inside the store (NoteStore.update), so
        concurrent partial updates of one note do not overwrite each other.

        Raises:
            ValidationError: content supplied as an empty string (→ 400)
            NotFoundError: no note with this id (→ 404)
        """
        changes = NoteUpdate.model_validate(payload).changes()
        if changes.get("content") == "":
            raise ValidationError(message="content must not be empty", field="content")

        updated = await store.update(note_id, changes)
        if updated is None:
            raise NotFoundError(resource="note", resource_id=note_id)

        logger.info("Updated note %s (%s)", note_id, ", ".join(sorted(changes)) or "touch")
        return updated

    async def delete_note(self, store: NoteStore, note_id: str) -> None:
        """
        Permanently delete a note.

        Raises:
            NotFoundError: no note with this id (→ 404)
        """
        if not await store.remove(note_id):
            raise NotFoundError(resource="note", resource_id=note_id)
        logger.info("Deleted note %s", note_id)


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
