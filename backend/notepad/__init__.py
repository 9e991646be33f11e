"""
Notepad Backend: Application Package Initializer
==================================================

What: Marks the `notepad` directory as a Python package.
Who:  Used by uvicorn (`notepad.main:app`), Alembic, pytest and the client sync layer.

Architecture Note:
    The server side follows a layered architecture:

    ┌─────────────────────────────────────┐
    │         Routes (API Layer)          │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← Validation, patch rules
    ├─────────────────────────────────────┤
    │      Models & Schemas (Data)        │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Stores (Persistence)            │  ← JSON file or SQL table
    └─────────────────────────────────────┘

    The `client` subpackage sits on the other side of the wire: it keeps an
    in-memory working set of notes in sync with either the REST API or a
    local key/value file.
"""

__version__ = "1.0.0"
