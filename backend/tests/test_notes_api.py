"""
Notepad Backend: Notes API Tests
==================================

What:  End-to-end tests of the HTTP surface via an in-process HTTPX client.
How:   Every test in the first classes runs once per store backend
       (see the parametrized `store` fixture in conftest.py).

What we test:
    ✅ Create → get round trip, list contents, delete semantics
    ✅ 400 for missing content and malformed JSON, with nothing persisted
    ✅ 404 "Note not found" for unknown ids, "Not found" for unknown routes
    ✅ OPTIONS on any path → 204 with CORS headers
    ✅ CORS headers on successes and on every error path
    ✅ Store failures and unexpected errors → 500 "Internal server error"
"""

import asyncio
import logging
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from notepad.exceptions import StoreError
from notepad.main import create_app
from notepad.middleware.cors import CORS_HEADERS
from notepad.middleware.logging import note_id_from_path


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


class TestCreateAndRead:

    @pytest.mark.asyncio
    async def test_create_returns_201(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "Groceries", "content": "milk", "tags": ["home"]}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Groceries"
        assert body["content"] == "milk"
        assert body["tags"] == ["home"]
        assert body["id"]
        assert body["created_at"] == body["updated_at"]
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_create_then_get_round_trip(self, test_client):
        created = (await test_client.post("/api/notes", json={"content": "hello"})).json()

        response = await test_client.get(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created
        assert created["title"] == ""

    @pytest.mark.asyncio
    async def test_list_starts_empty(self, test_client):
        response = await test_client.get("/api/notes")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_contains_created_notes(self, test_client):
        first = (await test_client.post("/api/notes", json={"content": "one"})).json()
        second = (await test_client.post("/api/notes", json={"content": "two"})).json()

        notes = (await test_client.get("/api/notes")).json()

        assert [n["id"] for n in notes] == [first["id"], second["id"]]

    @pytest.mark.asyncio
    async def test_client_supplied_identity_is_ignored(self, test_client):
        response = await test_client.post(
            "/api/notes",
            json={"id": "chosen", "content": "x", "created_at": "2000-01-01T00:00:00Z"},
        )
        body = response.json()
        assert body["id"] != "chosen"
        assert not body["created_at"].startswith("2000")

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, test_client):
        ids = set()
        for i in range(5):
            ids.add((await test_client.post("/api/notes", json={"content": str(i)})).json()["id"])
        assert len(ids) == 5


class TestValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"title": "no body"}, {"content": ""}, {"content": 3}])
    async def test_missing_content_is_400(self, test_client, payload):
        response = await test_client.post("/api/notes", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "content is required"
        assert_cors(response)
        assert (await test_client.get("/api/notes")).json() == []

    @pytest.mark.asyncio
    async def test_empty_body_is_missing_content(self, test_client):
        response = await test_client.post("/api/notes", content=b"")
        assert response.status_code == 400
        assert response.json()["error"] == "content is required"

    @pytest.mark.asyncio
    async def test_malformed_json_on_create(self, test_client):
        response = await test_client.post(
            "/api/notes", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON"
        assert (await test_client.get("/api/notes")).json() == []

    @pytest.mark.asyncio
    async def test_malformed_json_on_update(self, test_client):
        created = (await test_client.post("/api/notes", json={"content": "keep"})).json()

        response = await test_client.put(f"/api/notes/{created['id']}", content=b"{oops")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON"
        assert (await test_client.get(f"/api/notes/{created['id']}")).json() == created

    @pytest.mark.asyncio
    async def test_non_object_body(self, test_client):
        response = await test_client.post("/api/notes", json=["content"])
        assert response.status_code == 400
        assert response.json()["error"] == "Request body must be a JSON object"


class TestUpdate:

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client):
        created = (
            await test_client.post("/api/notes", json={"title": "old", "content": "body"})
        ).json()

        response = await test_client.put(
            f"/api/notes/{created['id']}", json={"title": "new", "content": None}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "new"
        assert body["content"] == "body"
        assert body["created_at"] == created["created_at"]
        assert datetime.fromisoformat(body["updated_at"].replace("Z", "+00:00")) >= (
            datetime.fromisoformat(created["updated_at"].replace("Z", "+00:00"))
        )
        assert (await test_client.get(f"/api/notes/{created['id']}")).json() == body

    @pytest.mark.asyncio
    async def test_empty_content_update_is_400(self, test_client):
        created = (await test_client.post("/api/notes", json={"content": "body"})).json()

        response = await test_client.put(f"/api/notes/{created['id']}", json={"content": ""})

        assert response.status_code == 400
        assert (await test_client.get(f"/api/notes/{created['id']}")).json()["content"] == "body"


class TestNotFound:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    async def test_unknown_id(self, test_client, method):
        kwargs = {"json": {"title": "x"}} if method == "PUT" else {}
        response = await test_client.request(method, "/api/notes/does-not-exist", **kwargs)

        assert response.status_code == 404
        assert response.json()["error"] == "Note not found"
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_delete_then_gone(self, test_client):
        keep = (await test_client.post("/api/notes", json={"content": "keep"})).json()
        drop = (await test_client.post("/api/notes", json={"content": "drop"})).json()

        response = await test_client.delete(f"/api/notes/{drop['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert_cors(response)
        assert [n["id"] for n in (await test_client.get("/api/notes")).json()] == [keep["id"]]
        assert (await test_client.get(f"/api/notes/{drop['id']}")).status_code == 404
        assert (await test_client.delete(f"/api/notes/{drop['id']}")).status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/unknown"),
            ("GET", "/notes"),
            ("GET", "/api/notes/"),
            ("PATCH", "/api/notes"),
            ("POST", "/api/notes/some-id"),
        ],
    )
    async def test_unmatched_route(self, test_client, method, path):
        response = await test_client.request(method, path)

        assert response.status_code == 404
        assert response.json()["error"] == "Not found"
        assert_cors(response)


class TestCors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/notes", "/api/notes/abc", "/anything/at/all", "/"])
    async def test_options_is_204(self, test_client, path):
        response = await test_client.options(path)

        assert response.status_code == 204
        assert response.content == b""
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_success_has_cors_headers(self, test_client):
        assert_cors(await test_client.get("/api/notes"))


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_store_error_is_500(self, store, test_client):
        with patch.object(store, "load_all", AsyncMock(side_effect=StoreError())):
            response = await test_client.get("/api/notes")

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500(self, store):
        app = create_app(store=store)
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        with patch.object(store, "load_one", AsyncMock(side_effect=RuntimeError("boom"))):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/api/notes/abc")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "boom" not in response.text
        assert_cors(response)


class TestCorruptJsonFile:

    @pytest.mark.asyncio
    async def test_malformed_file_is_500_and_not_repaired(self, json_store):
        json_store.path.write_text("[{broken", encoding="utf-8")
        app = create_app(store=json_store)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            listed = await client.get("/api/notes")
            created = await client.post("/api/notes", json={"content": "x"})

        assert listed.status_code == 500
        assert created.status_code == 500
        assert json_store.path.read_text(encoding="utf-8") == "[{broken"


class TestAppSurface:

    @pytest.mark.asyncio
    async def test_routes_without_prefix(self, json_store):
        app = create_app(store=json_store, api_prefix="")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            created = await client.post("/notes", json={"content": "bare"})
            missing = await client.get("/api/notes")

        assert created.status_code == 201
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_health(self, test_client, store):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == f"{store.name}:ok"

    @pytest.mark.asyncio
    async def test_health_unreachable_store(self, store, test_client):
        with patch.object(store, "health_check", AsyncMock(return_value=False)):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        echoed = await test_client.get("/api/notes", headers={"X-Request-ID": "abc123"})
        generated = await test_client.get("/api/notes")

        assert echoed.headers["X-Request-ID"] == "abc123"
        assert len(generated.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get("/api/notes/nope", headers={"X-Request-ID": "trace-1"})
        assert response.json()["request_id"] == "trace-1"


class TestConcurrentUpdates:

    @pytest.mark.asyncio
    async def test_partial_puts_on_one_note_both_apply(self, test_client):
        created = (
            await test_client.post("/api/notes", json={"title": "t0", "content": "c0"})
        ).json()
        url = f"/api/notes/{created['id']}"

        first, second = await asyncio.gather(
            test_client.put(url, json={"title": "T1"}),
            test_client.put(url, json={"content": "C1"}),
        )

        assert first.status_code == second.status_code == 200
        stored = (await test_client.get(url)).json()
        assert (stored["title"], stored["content"]) == ("T1", "C1")


class TestSqlStyleTimestamps:

    @pytest.mark.asyncio
    async def test_update_note_with_zoneless_timestamps(self, json_store):
        json_store.path.write_text(
            '[{"id": "x", "title": "old", "content": "c", "tags": [],'
            ' "created_at": "2024-01-01 10:00:00", "updated_at": "2024-01-01 10:00:00"}]',
            encoding="utf-8",
        )
        app = create_app(store=json_store)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.put("/api/notes/x", json={"title": "new"})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "new"
        assert body["created_at"] == "2024-01-01T10:00:00Z"


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_note_id_is_logged(self, test_client, caplog):
        created = (await test_client.post("/api/notes", json={"content": "x"})).json()
        caplog.set_level(logging.INFO, logger="notepad.access")

        await test_client.get(f"/api/notes/{created['id']}", headers={"X-Request-ID": "r-1"})
        await test_client.get("/api/notes/unknown")

        lines = [r.getMessage() for r in caplog.records if r.name == "notepad.access"]
        assert any(f"note={created['id']}" in line and "rid=r-1" in line for line in lines)
        missing = [r for r in caplog.records if "note=unknown" in r.getMessage()]
        assert missing and missing[0].levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_options_and_health_are_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notepad.access")

        await test_client.options("/api/notes")
        await test_client.get("/health")

        assert [r for r in caplog.records if r.name == "notepad.access"] == []

    @pytest.mark.parametrize(
        "path, expected",
        [("/api/notes/abc", "abc"), ("/notes/abc", "abc"), ("/api/notes", None), ("/health", None)],
    )
    def test_note_id_from_path(self, path, expected):
        assert note_id_from_path(path) == expected


class TestRequestIdHeader:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["has spaces", "x" * 65, "semi;colon"])
    async def test_unsafe_client_id_is_replaced(self, test_client, header):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": header})

        rid = response.headers["X-Request-ID"]
        assert rid != header
        assert len(rid) == 8
