"""
Notepad Client: Sync Strategies
=================================

What:  Keep an AppState consistent with where the notes live.
How:   Two strategies with the same interface:

    RemoteNoteSync  talks to the REST API; after every mutation it re-fetches
                    the full list, so ordering is whatever the server returns.
    LocalNoteSync   keeps notes in LocalStorage; mutates the list directly
                    (new notes first), then persists the whole list.

    load(state)                          → state with fresh notes
    save(state, draft, note_id=None)     → create (no id) or update
    delete(state, note_id)               → state without the note

Error Handling:
    Every failure is logged and raised as SyncError. The caller keeps the
    state it passed in, so nothing is partially applied.
"""

import json
import logging
from typing import List, Optional

from notepad.client.api_client import NotesApiClient
from notepad.client.local_storage import NOTES_KEY, LocalStorage
from notepad.client.state import AppState, NoteDraft, build_update_patch
from notepad.config import Settings
from notepad.config import settings as default_settings
from notepad.exceptions import SyncError
from notepad.models.note import new_note_id, utcnow
from notepad.schemas.note import NoteResponse

logger = logging.getLogger(__name__)


class RemoteNoteSync:
    """Server-backed sync: every change goes through the API."""

    def __init__(self, api: NotesApiClient):
        self.api = api

    async def load(self, state: AppState) -> AppState:
        try:
            notes = await self.api.list_notes()
        except SyncError as e:
            logger.error("Failed to load notes: %s", e.message)
            raise
        return state.with_notes(notes)

    async def save(
        self, state: AppState, draft: NoteDraft, note_id: Optional[str] = None
    ) -> AppState:
        patch = build_update_patch(draft)
        try:
            if note_id:
                await self.api.update_note(note_id, patch)
            else:
                await self.api.create_note(patch)
        except SyncError as e:
            logger.error("Error saving note: %s", e.message)
            raise
        return await self.load(state)

    async def delete(self, state: AppState, note_id: str) -> AppState:
        try:
            await self.api.delete_note(note_id)
        except SyncError as e:
            logger.error("Error deleting note %s: %s", note_id, e.message)
            raise
        return await self.load(state)


class LocalNoteSync:
    """Local-only sync: the whole list lives in one storage slot."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    async def _persist(self, notes: List[NoteResponse]) -> None:
        await self.storage.set_item(
            NOTES_KEY, json.dumps([note.model_dump(mode="json") for note in notes])
        )

    async def load(self, state: AppState) -> AppState:
        try:
            saved = await self.storage.get_item(NOTES_KEY)
            notes = [NoteResponse.model_validate(item) for item in json.loads(saved)] if saved else []
        except SyncError as e:
            logger.error("Failed to load notes: %s", e.message)
            raise
        except (TypeError, ValueError) as e:
            logger.error("Stored notes are unreadable: %s", e)
            raise SyncError(message="Stored notes are unreadable") from e
        return state.with_notes(notes)

    async def save(
        self, state: AppState, draft: NoteDraft, note_id: Optional[str] = None
    ) -> AppState:
        now = utcnow()
        notes = list(state.notes)
        if note_id:
            current = state.find(note_id)
            if current is None:
                return state
            changes = {
                "title": draft.title,
                "content": draft.content,
                "updated_at": max(now, current.updated_at),
            }
            if draft.tags is not None:
                changes["tags"] = list(draft.tags)
            notes[notes.index(current)] = current.model_copy(update=changes)
        else:
            notes.insert(
                0,
                NoteResponse(
                    id=new_note_id(),
                    title=draft.title,
                    content=draft.content,
                    tags=list(draft.tags or []),
                    created_at=now,
                    updated_at=now,
                ),
            )

        await self._persist_or_fail(notes, "Error saving note")
        return state.with_notes(notes)

    async def delete(self, state: AppState, note_id: str) -> AppState:
        notes = [note for note in state.notes if note.id != note_id]
        await self._persist_or_fail(notes, "Error deleting note")
        return state.with_notes(notes)

    async def _persist_or_fail(self, notes: List[NoteResponse], what: str) -> None:
        try:
            await self._persist(notes)
        except SyncError as e:
            logger.error("%s: %s", what, e.message)
            raise
        except OSError as e:
            logger.error("%s: %s", what, e)
            raise SyncError(message=what) from e


def remote_sync_from_settings(settings: Settings = default_settings) -> RemoteNoteSync:
    """RemoteNoteSync pointed at API_BASE_URL."""
    return RemoteNoteSync(NotesApiClient(settings.api_base_url))


def local_sync_from_settings(settings: Settings = default_settings) -> LocalNoteSync:
    """LocalNoteSync backed by LOCAL_STORAGE_FILE."""
    return LocalNoteSync(LocalStorage(settings.local_storage_file))
