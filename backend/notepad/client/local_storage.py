"""
Notepad Client: Local Key/Value Storage
=========================================

What:  Browser-localStorage-style persistence for the local-only variant.
How:   One JSON object on disk mapping keys to string values. Every
       set_item/remove_item rewrites the whole file (tmp file + rename).
Who:   LocalNoteSync.

Keys in use:
    notes  → JSON-serialised array of notes
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import aiofiles
import aiofiles.os

from notepad.exceptions import SyncError

logger = logging.getLogger(__name__)

NOTES_KEY = "notes"


class LocalStorage:
    """String-valued key/value slots persisted in a single file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def _load(self) -> Dict[str, str]:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as fh:
                text = await fh.read()
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.error("Could not read local storage %s: %s", self.path, e)
            raise SyncError(
                message="Local storage is unreadable",
                context={"path": str(self.path), "error": str(e)},
            ) from e
        try:
            data = json.loads(text) if text.strip() else {}
        except ValueError as e:
            raise SyncError(
                message="Local storage file is corrupt",
                context={"path": str(self.path)},
            ) from e
        if not isinstance(data, dict):
            raise SyncError(message="Local storage file is corrupt", context={"path": str(self.path)})
        return data

    async def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as fh:
            await fh.write(json.dumps(data, indent=2, ensure_ascii=False))
        await aiofiles.os.replace(tmp_path, self.path)

    async def get_item(self, key: str) -> Optional[str]:
        return (await self._load()).get(key)

    async def set_item(self, key: str, value: str) -> None:
        data = await self._load()
        data[key] = value
        await self._save(data)

    async def remove_item(self, key: str) -> None:
        data = await self._load()
        if data.pop(key, None) is not None:
            await self._save(data)
