# Middleware package init
"""
Notepad Backend: Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [CORS] → [Request ID] → [Logging] → Route Handler

    1. CORS first: OPTIONS is answered with 204 before anything else runs,
       and every other response leaves with the CORS headers attached
    2. Request ID: correlation id for logs and error bodies
    3. Logging: access line with status and duration
"""
