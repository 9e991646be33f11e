"""
Notepad Client: Sync Layer
============================

What:  Client-side logic that keeps an in-memory note list consistent with
       the store, either through the REST API or a local key/value file.

Module Inventory:
    - state.py:          AppState, filter_notes, validate_draft, build_update_patch
    - api_client.py:     NotesApiClient (httpx)
    - local_storage.py:  LocalStorage key/value file
    - sync.py:           RemoteNoteSync, LocalNoteSync
"""

from notepad.client.api_client import NotesApiClient
from notepad.client.local_storage import NOTES_KEY, LocalStorage
from notepad.client.state import (
    AppState,
    NoteDraft,
    build_update_patch,
    filter_notes,
    validate_draft,
)
from notepad.client.sync import (
    LocalNoteSync,
    RemoteNoteSync,
    local_sync_from_settings,
    remote_sync_from_settings,
)

__all__ = [
    "AppState",
    "LocalNoteSync",
    "LocalStorage",
    "NOTES_KEY",
    "NoteDraft",
    "NotesApiClient",
    "RemoteNoteSync",
    "build_update_patch",
    "filter_notes",
    "local_sync_from_settings",
    "remote_sync_from_settings",
    "validate_draft",
]
