"""
Notepad Backend: Permissive CORS Middleware
=============================================

What:  Adds allow-everything CORS headers to every response and answers
       every OPTIONS request with 204 before routing.
How:   Starlette middleware. OPTIONS short-circuits with an empty 204,
       whatever the path; all other responses get the headers appended.
Who:   Outermost application middleware (see main.create_app()).

Why not Starlette's CORSMiddleware:
    It only treats OPTIONS as a preflight when Origin and
    Access-Control-Request-Method are present, and answers 200 with a body.
    The notes API answers every OPTIONS with a bare 204.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """Any origin, the five API methods, and a Content-Type request header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response
