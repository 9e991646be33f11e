"""
Notepad Backend: Request ID Middleware
========================================

What:  Correlation id per request, echoed in the X-Request-ID header and in
       every error body.
How:   A client-supplied X-Request-ID is reused when it is a short token
       (letters, digits, `.`, `_`, `-`, at most 64 characters); anything
       else is replaced by 8 hex characters of a uuid4. The id lives in a
       ContextVar so loggers and exception handlers can read it.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_CLIENT_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def pick_request_id(header_value: str) -> str:
    """The client's id if it is safe to log and echo, else a fresh one."""
    if header_value and _CLIENT_ID.fullmatch(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = pick_request_id(request.headers.get(REQUEST_ID_HEADER, ""))
        request_id_var.set(rid)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
