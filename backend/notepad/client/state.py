"""
Notepad Client: Application State & Pure Transforms
=====================================================

What:  The client's in-memory working set and the side-effect-free functions
       that operate on it.
How:   AppState is an immutable pydantic model; every handler receives a
       state and returns a new one, so a failed operation simply leaves the
       caller holding the previous state.
Who:   Used by RemoteNoteSync / LocalNoteSync and by any presentation layer.

Functions:
    filter_notes()        case-insensitive search over title, content, tags
    validate_draft()      trim the form input, reject empty content
    build_update_patch()  JSON body for POST/PUT
"""

from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from notepad.exceptions import ValidationError
from notepad.schemas.note import NoteResponse, normalize_tags


class NoteDraft(BaseModel):
    """Form input after validation. tags=None means "not part of this form"."""
    title: str = ""
    content: str
    tags: Optional[List[str]] = None


class AppState(BaseModel):
    """
    Client working set.

    Attributes:
        notes: every note, in display order
        query: current search text
        match_tags: whether search also looks at tags
    """
    notes: List[NoteResponse] = Field(default_factory=list)
    query: str = ""
    match_tags: bool = True

    model_config = {"frozen": True}

    def with_notes(self, notes: Iterable[NoteResponse]) -> "AppState":
        return self.model_copy(update={"notes": list(notes)})

    def with_query(self, query: str) -> "AppState":
        return self.model_copy(update={"query": query})

    @property
    def visible_notes(self) -> List[NoteResponse]:
        """Notes matching the current query; recomputed on every access."""
        return filter_notes(self.notes, self.query, match_tags=self.match_tags)

    def find(self, note_id: str) -> Optional[NoteResponse]:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None


def filter_notes(
    notes: Iterable[NoteResponse], query: str, match_tags: bool = True
) -> List[NoteResponse]:
    """
    Case-insensitive substring search.

    The trimmed query is matched against the title, the content and, when
    match_tags is set, the tags joined by spaces. An empty query matches all.
    """
    q = query.strip().lower()
    if not q:
        return list(notes)

    matched = []
    for note in notes:
        haystacks = [note.title or "", note.content or ""]
        if match_tags:
            haystacks.append(" ".join(note.tags))
        if any(q in text.lower() for text in haystacks):
            matched.append(note)
    return matched


def validate_draft(title: str, content: str, tags: Any = None) -> NoteDraft:
    """
    Validate note form input.

    Raises:
        ValidationError: content is empty after trimming
    """
    title = (title or "").strip()
    content = (content or "").strip()
    if not content:
        raise ValidationError(message="Content is required", field="content")
    return NoteDraft(
        title=title,
        content=content,
        tags=normalize_tags(tags) if tags is not None else None,
    )


def build_update_patch(draft: NoteDraft) -> Dict[str, Any]:
    """Request body for create/update; tags only when the form carries them."""
    patch: Dict[str, Any] = {"title": draft.title, "content": draft.content}
    if draft.tags is not None:
        patch["tags"] = list(draft.tags)
    return patch
