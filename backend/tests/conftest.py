"""
Notepad Backend: Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── json_store:   JsonFileNoteStore in a temp directory
    ├── sql_store:    SqlNoteStore on a temp SQLite file (table created)
    ├── store:        parametrized over both backends
    ├── mock_store:   AsyncMock standing in for a NoteStore
    ├── app:          FastAPI app bound to `store`
    └── test_client:  HTTPX AsyncClient talking to `app` in-process
"""

import os
import tempfile

# Settings are read at import time, so point them at throwaway locations
# BEFORE any notepad module is imported
_tmp_root = tempfile.mkdtemp(prefix="notepad_test_")
os.environ["NOTES_FILE"] = os.path.join(_tmp_root, "notes.json")
os.environ["DB_FILE"] = os.path.join(_tmp_root, "data.sqlite")
os.environ["LOCAL_STORAGE_FILE"] = os.path.join(_tmp_root, "local_storage.json")
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from notepad.main import create_app  # noqa: E402
from notepad.schemas.note import NoteResponse  # noqa: E402
from notepad.stores import JsonFileNoteStore, NoteStore, SqlNoteStore  # noqa: E402


@pytest_asyncio.fixture
async def json_store(tmp_path):
    """A file-backed store whose file does not exist yet."""
    store = JsonFileNoteStore(tmp_path / "data" / "notes.json")
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """A table-backed store on a fresh SQLite file."""
    store = SqlNoteStore(f"sqlite+aiosqlite:///{tmp_path / 'notes.sqlite'}")
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["json", "sql"])
async def store(request, tmp_path):
    """Each test using this fixture runs once per backend."""
    if request.param == "json":
        backend = JsonFileNoteStore(tmp_path / "notes.json")
    else:
        backend = SqlNoteStore(f"sqlite+aiosqlite:///{tmp_path / 'notes.sqlite'}")
    await backend.initialize()
    yield backend
    await backend.close()


@pytest.fixture
def mock_store():
    """
    Provides a mock note store.

    Usage:
        mock_store.load_one.return_value = sample_note
        result = await note_service.get_note(mock_store, sample_note.id)
    """
    return AsyncMock(spec=NoteStore)


@pytest.fixture
def sample_note():
    created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return NoteResponse(
        id="a" * 32,
        title="Groceries",
        content="milk, eggs",
        tags=["home"],
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
