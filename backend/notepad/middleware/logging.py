"""
Notepad Backend: Access Log Middleware
========================================

What:  One `notepad.access` line per API request, tagged with the note id
       when the path addresses a single note.
Who:   Sits inside RequestIDMiddleware (the request id is already set) and
       inside the CORS middleware, so OPTIONS short-circuits never get here.

Example lines:
    PUT /api/notes/3f9c... → 200 in 2.1ms note=3f9c... rid=1f2e3d4c
    GET /api/notes → 500 in 0.8ms rid=77aa01bc

Note bodies are never logged. /health is not logged at all.
"""

import logging
import re
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notepad.middleware.request_id import request_id_var

logger = logging.getLogger("notepad.access")

_NOTE_PATH = re.compile(r"/notes/(?P<note_id>[^/]+)$")


def note_id_from_path(path: str) -> Optional[str]:
    """`abc` for ".../notes/abc", None for the collection and other paths."""
    match = _NOTE_PATH.search(path)
    return match.group("note_id") if match else None


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    return logging.WARNING if status >= 400 else logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log keyed by note id; requests that raise are logged before re-raising."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        note_id = note_id_from_path(path)
        tag = f" note={note_id}" if note_id else ""
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "%s %s → unhandled error after %.1fms%s rid=%s",
                request.method,
                path,
                (time.perf_counter() - started) * 1000,
                tag,
                request_id_var.get(""),
            )
            raise

        logger.log(
            _level_for(response.status_code),
            "%s %s → %d in %.1fms%s rid=%s",
            request.method,
            path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            tag,
            request_id_var.get(""),
            extra={"note_id": note_id, "status": response.status_code},
        )
        return response
