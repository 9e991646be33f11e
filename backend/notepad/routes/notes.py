"""
Notepad Backend: Notes Route Handlers
=======================================

What:  The five CRUD endpoints under {API_PREFIX}/notes.
How:   Decodes the JSON body, delegates to NoteService, returns JSON.
Who:   Called by the client sync layer (NotesApiClient) and any HTTP client.

Route Table:
    GET    /notes        → 200 list of notes
    GET    /notes/{id}   → 200 note | 404
    POST   /notes        → 201 created note | 400
    PUT    /notes/{id}   → 200 updated note | 404 | 400
    DELETE /notes/{id}   → 204 empty body | 404

The prefix is applied in main.create_app() so the same router serves both
"/api/notes" and the bare "/notes" layout.
"""

import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, Response

from notepad.exceptions import MalformedBodyError, ValidationError
from notepad.schemas.note import ErrorResponse, NoteResponse
from notepad.services.note_service import note_service
from notepad.stores.base import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


# ── Dependencies ──────────────────────────────────────────────────────────

def get_note_store(request: Request) -> NoteStore:
    """The store attached to the application by create_app()."""
    return request.app.state.note_store


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Decode the request body as a JSON object.

    - empty body        → {}
    - unparsable body   → MalformedBodyError ("Invalid JSON", 400)
    - non-object JSON   → ValidationError (400)
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except ValueError as e:
        # Covers JSONDecodeError and undecodable UTF-8
        raise MalformedBodyError(context={"error": str(e)}) from e
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object", field="body")
    return payload


# ── Routes ────────────────────────────────────────────────────────────────

@router.get(
    "/notes",
    response_model=List[NoteResponse],
    summary="List all notes",
)
async def list_notes(store: NoteStore = Depends(get_note_store)) -> List[NoteResponse]:
    """Every note, in the order the store keeps them."""
    return await note_service.list_notes(store)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Get a single note by id",
)
async def get_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    return await note_service.get_note(store, note_id)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={400: {"description": "Missing content or malformed JSON", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    payload: Dict[str, Any] = Depends(read_json_body),
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    """
    Create a note.

    Body: {"content": str (required), "title": str, "tags": [str] | "a, b"}
    The server assigns id, created_at and updated_at.
    """
    return await note_service.create_note(store, payload)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed JSON or empty content", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Update a note",
)
async def update_note(
    note_id: str,
    payload: Dict[str, Any] = Depends(read_json_body),
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    """Partial update: only supplied, correctly typed fields change."""
    return await note_service.update_note(store, note_id, payload)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
) -> Response:
    await note_service.delete_note(store, note_id)
    return Response(status_code=204)
