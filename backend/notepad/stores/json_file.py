"""
Notepad Backend: JSON File Note Store
=======================================

What:  Persists the whole note collection as one JSON array in a flat file.
How:   Every mutation is read → modify → rewrite of the entire file.
       The rewrite goes to a sibling `.tmp` file which is then renamed over
       the notes file, so readers never see a half-written array.
Who:   Selected by STORE_BACKEND=json (the default).

Concurrency Model:
    Mutations inside one process are serialised by an asyncio.Lock, so two
    concurrent requests cannot interleave their read-modify-write cycles.
    The store assumes a SINGLE WRITER PROCESS: two processes sharing the
    same file can still overwrite each other's changes. Reads take no lock.

Failure Semantics:
    - File absent: treated as an empty collection
    - File present but not a JSON array of notes: StoreError (fatal, no repair)
    - OS-level read/write failure: StoreError
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import aiofiles
import aiofiles.os

from notepad.exceptions import StoreError
from notepad.models.note import new_note_id, utcnow
from notepad.schemas.note import NoteCreate, NoteResponse
from notepad.stores.base import NoteStore, apply_changes

logger = logging.getLogger(__name__)


class JsonFileNoteStore(NoteStore):
    """
    File-backed note store.

    On-disk format (UTF-8, indented):
        [
          {"id": "3f9c...", "title": "", "content": "hello", "tags": [],
           "created_at": "2026-01-15T12:00:00Z", "updated_at": "2026-01-15T12:00:00Z"}
        ]
    """

    name = "json"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._tmp_path = self.path.with_name(self.path.name + ".tmp")
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(context={"path": str(self.path), "error": str(e)}) from e
        logger.info("JSON note store at %s", self.path.resolve())

    async def health_check(self) -> bool:
        return self.path.parent.is_dir()

    # ── Raw file access ───────────────────────────────────────────────────

    async def _read(self) -> List[NoteResponse]:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as fh:
                text = await fh.read()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Could not read notes file %s: %s", self.path, e)
            raise StoreError(context={"path": str(self.path), "error": str(e)}) from e

        try:
            raw = json.loads(text)
            if not isinstance(raw, list):
                raise ValueError("notes file must contain a JSON array")
            return [NoteResponse.model_validate(item) for item in raw]
        except ValueError as e:
            # json.JSONDecodeError and pydantic's ValidationError are both ValueErrors
            logger.error("Notes file %s is malformed: %s", self.path, e)
            raise StoreError(
                context={"path": str(self.path), "error_type": type(e).__name__}
            ) from e

    async def _write(self, notes: List[NoteResponse]) -> None:
        payload = json.dumps(
            [note.model_dump(mode="json") for note in notes],
            indent=2,
            ensure_ascii=False,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self._tmp_path, "w", encoding="utf-8") as fh:
                await fh.write(payload)
            await aiofiles.os.replace(self._tmp_path, self.path)
        except OSError as e:
            logger.error("Could not write notes file %s: %s", self.path, e)
            raise StoreError(context={"path": str(self.path), "error": str(e)}) from e

    # ── NoteStore contract ────────────────────────────────────────────────

    async def load_all(self) -> List[NoteResponse]:
        return await self._read()

    async def load_one(self, note_id: str) -> Optional[NoteResponse]:
        for note in await self._read():
            if note.id == note_id:
                return note
        return None

    async def insert(self, draft: NoteCreate) -> NoteResponse:
        now = utcnow()
        note = NoteResponse(
            id=new_note_id(),
            title=draft.title,
            content=draft.content,
            tags=list(draft.tags),
            created_at=now,
            updated_at=now,
        )
        async with self._write_lock:
            notes = await self._read()
            notes.append(note)
            await self._write(notes)
        return note

    async def update(self, note_id: str, changes: Dict[str, Any]) -> Optional[NoteResponse]:
        # The merge reads the record under the lock, never a copy from before it
        async with self._write_lock:
            notes = await self._read()
            for index, existing in enumerate(notes):
                if existing.id == note_id:
                    notes[index] = apply_changes(existing, changes)
                    await self._write(notes)
                    return notes[index]
        return None

    async def remove(self, note_id: str) -> bool:
        async with self._write_lock:
            notes = await self._read()
            remaining = [note for note in notes if note.id != note_id]
            if len(remaining) == len(notes):
                return False
            await self._write(remaining)
        return True
