"""
Notepad Backend: Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the anticipated error scenarios.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       JSON error responses with the matching HTTP status code.
Who:   Raised by the note service, the stores and the client sync layer.

Exception Hierarchy:
    NotepadError (base)
    ├── ValidationError     → 400 Bad Request (client can fix)
    ├── MalformedBodyError  → 400 Bad Request (body is not JSON)
    ├── NotFoundError       → 404 Not Found
    ├── StoreError          → 500 Internal Server Error
    └── SyncError           → client side: request to the API failed

Anything that is not a NotepadError is unexpected and becomes a generic 500.
"""

from typing import Any, Dict, Optional


class NotepadError(Exception):
    """
    Base exception for all Notepad application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotepadError):
    """
    Raised when client input fails validation.

    When:    Missing/empty/mistyped `content`, body that is not a JSON object.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "content is required",
            "details": {"field": "content"},
            "request_id": "1f2e3d4c"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class MalformedBodyError(NotepadError):
    """
    Raised when a request body cannot be parsed as JSON.

    HTTP:    400 Bad Request, always with the same fixed message.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid JSON", context=context)


class NotFoundError(NotepadError):
    """
    Raised when a requested note does not exist.

    When:    GET/PUT/DELETE /api/notes/{id} with an unknown id.
    HTTP:    404 Not Found

    Stores return None for missing records; the service layer converts that
    into this exception so the route stays free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(NotepadError):
    """
    Raised when the persistence backend fails.

    When:    File unreadable/unwritable, persisted JSON is malformed,
             a SQL statement fails.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the context
    (file path, exception type) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "Note storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SyncError(NotepadError):
    """
    Raised by the client sync layer when talking to the store fails.

    What:    Non-success API response, network failure or unreadable local data.
    Who:     Raised by NotesApiClient / LocalNoteSync, surfaced to the caller.

    Attributes:
        status_code: HTTP status of the failed response (None for transport
                     failures and local storage errors)
    """

    def __init__(
        self,
        message: str = "Could not synchronise notes",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
