"""
Notepad Backend: Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the note contract shared by the API, the
       stores and the client sync layer.
How:   NoteResponse is the canonical note record (also the on-disk shape of
       the JSON store). NoteCreate / NoteUpdate are lenient input models:
       fields of the wrong type are dropped instead of rejected, matching
       the "only string-typed supplied fields are applied" rule.
Who:   NoteService, both stores, the client sync layer, route handlers.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


def normalize_tags(value: Any) -> List[str]:
    """
    Normalise user-supplied tags.

    Accepts a list of strings or a comma-separated string; every entry is
    trimmed and empty entries (or non-string items) are dropped. Order is kept.

    >>> normalize_tags(" work, , ideas ")
    ['work', 'ideas']
    """
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


# ══════════════════════════════════════════════════════════════════════════
# Note Record
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note.
    Who:   Returned by every notes endpoint; persisted as-is by the JSON store.

    Invariants:
        - content is a non-empty string
        - created_at <= updated_at
    """
    id: str = Field(description="Opaque unique note identifier")
    title: str = Field(default="", description="Optional title")
    content: str = Field(description="Note body")
    tags: List[str] = Field(default_factory=list, description="Trimmed, non-empty tags")
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQL-style timestamps ("2024-01-01 10:00:00") carry no zone; they are UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    What:  Validated body of POST /api/notes.
    How:   `title` falls back to "" unless it is a string; `tags` is
           normalised. `content` must already be checked by the caller
           (NoteService) so the 400 message stays under its control.
           Unknown keys (id, created_at, ...) are ignored.
    """
    title: str = ""
    content: str
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def coerce_title(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> List[str]:
        return normalize_tags(v)


class NoteUpdate(BaseModel):
    """
    What:  Validated body of PUT /api/notes/{id}.
    How:   Every field is optional; a field supplied with the wrong type is
           treated as not supplied. `changes()` returns only the fields to apply.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def drop_non_strings(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> Optional[List[str]]:
        if isinstance(v, (str, list, tuple)):
            return normalize_tags(v)
        return None

    def changes(self) -> dict:
        """Supplied, correctly typed fields only."""
        return self.model_dump(exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every failing request.

    Example:
        {"error": "Note not found", "request_id": "550e8400"}
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check body: service status plus the store probe result."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Store backend and reachability, e.g. 'json:ok'")
    uptime_seconds: float = Field(description="Seconds since service started")
