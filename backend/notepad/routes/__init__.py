# Routes package init
"""
Notepad Backend: API Routes Package
=====================================

Route Inventory:
    - notes.py:   GET/POST      {API_PREFIX}/notes
                  GET/PUT/DELETE {API_PREFIX}/notes/{id}
    - health.py:  GET /health

Routes are thin: decode the request, call the service, pick the status code.
"""
