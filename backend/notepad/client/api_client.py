"""
Notepad Client: REST API Client
=================================

What:  Thin async wrapper over the notes REST API.
How:   httpx.AsyncClient with a JSON content type. A non-2xx response
       raises SyncError carrying the server's `error` text (or the reason
       phrase when the body is not JSON); transport failures raise SyncError
       too. 204 responses return None.
Who:   RemoteNoteSync.

Example:
    async with NotesApiClient("http://localhost:4000/api") as api:
        note = await api.create_note({"content": "hello"})
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from notepad.exceptions import SyncError
from notepad.schemas.note import NoteResponse

logger = logging.getLogger(__name__)


class NotesApiClient:
    """
    Client for {API_BASE_URL}/notes.

    Args:
        base_url: API root including the prefix, e.g. http://localhost:4000/api
        transport: Optional httpx transport (tests pass an ASGITransport)
        timeout: Optional request timeout in seconds (None: wait indefinitely)
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def __aenter__(self) -> "NotesApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_json(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Send one request and decode the JSON answer.

        Raises:
            SyncError: network failure or non-success status
        """
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            raise SyncError(
                message=f"Could not reach the notes API: {e}",
                context={"method": method, "path": path},
            ) from e

        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except (ValueError, AttributeError):
                message = response.reason_phrase
            raise SyncError(
                message=message,
                status_code=response.status_code,
                context={"method": method, "path": path},
            )

        if response.status_code == 204:
            return None
        return response.json()

    async def list_notes(self) -> List[NoteResponse]:
        data = await self.fetch_json("GET", "/notes")
        return [NoteResponse.model_validate(item) for item in data]

    async def get_note(self, note_id: str) -> NoteResponse:
        return NoteResponse.model_validate(await self.fetch_json("GET", f"/notes/{note_id}"))

    async def create_note(self, payload: Dict[str, Any]) -> NoteResponse:
        return NoteResponse.model_validate(await self.fetch_json("POST", "/notes", payload))

    async def update_note(self, note_id: str, payload: Dict[str, Any]) -> NoteResponse:
        return NoteResponse.model_validate(
            await self.fetch_json("PUT", f"/notes/{note_id}", payload)
        )

    async def delete_note(self, note_id: str) -> None:
        await self.fetch_json("DELETE", f"/notes/{note_id}")
