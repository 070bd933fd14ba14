import asyncio
import json

import httpx
import pytest

from backoffice.clients.documents import HttpDocumentStore
from backoffice.config import Settings
from backoffice.dependencies.services import build_document_store
from backoffice.services.exceptions import DownstreamServiceError
from backoffice.services.memory_store import InMemoryDocumentStore


def _store(handler) -> HttpDocumentStore:
    return HttpDocumentStore(
        "http://store.local/",
        token="secret",
        transport=httpx.MockTransport(handler),
    )


def test_http_store_translates_operations_to_requests() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/collections/clients/documents":
            return httpx.Response(200, json={"documents": [{"id": "c1", "company": "Acme"}]})
        if request.method == "GET" and path == "/collections/clients/documents/missing":
            return httpx.Response(404, json={"error": "Not found"})
        if request.method == "POST":
            return httpx.Response(201, json={"id": "new", **json.loads(request.content)})
        if request.method == "PUT":
            return httpx.Response(200, json={"id": "c1", **json.loads(request.content)})
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(500)

    async def scenario():
        store = _store(handler)
        try:
            listed = await store.list(
                "clients", where={"status": "active"}, order_by="createdAt", descending=True
            )
            missing = await store.get("clients", "missing")
            added = await store.add("clients", {"company": "Beta"})
            merged = await store.set("clients", "c1", {"status": "inactive"}, merge=True)
            deleted = await store.delete("clients", "c1")
        finally:
            await store.close()
        return listed, missing, added, merged, deleted

    listed, missing, added, merged, deleted = asyncio.run(scenario())

    assert listed == [{"id": "c1", "company": "Acme"}]
    assert missing is None
    assert added == {"id": "new", "company": "Beta"}
    assert merged["status"] == "inactive"
    assert deleted is True

    list_request = seen[0]
    assert list_request.url.params["orderBy"] == "createdAt"
    assert list_request.url.params["direction"] == "desc"
    assert list_request.url.params["where.status"] == "active"
    assert list_request.headers["Authorization"] == "Bearer secret"
    assert seen[3].url.params["merge"] == "true"


def test_http_store_wraps_error_responses() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    async def scenario():
        store = _store(handler)
        try:
            await store.add("finance", {"amount": 1})
        finally:
            await store.close()

    with pytest.raises(DownstreamServiceError) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.status_code == 503


def test_http_store_wraps_connection_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        store = _store(handler)
        try:
            await store.get("settings", "current")
        finally:
            await store.close()

    with pytest.raises(DownstreamServiceError) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.status_code is None


def test_memory_store_merge_is_deep_and_copies() -> None:
    store = InMemoryDocumentStore()

    async def scenario():
        await store.set("meta", "counters", {"bySeq": {"2024": 3}})
        await store.set("meta", "counters", {"bySeq": {"2025": 1}}, merge=True)
        document = await store.get("meta", "counters")
        document["bySeq"]["2024"] = 99
        return await store.get("meta", "counters")

    assert asyncio.run(scenario()) == {"id": "counters", "bySeq": {"2024": 3, "2025": 1}}


def test_store_selection_follows_configuration() -> None:
    assert isinstance(build_document_store(Settings(use_mock_data=True)), InMemoryDocumentStore)
    assert isinstance(
        build_document_store(Settings(use_mock_data=False, store_base_url=None)),
        InMemoryDocumentStore,
    )
    remote = build_document_store(
        Settings(use_mock_data=False, store_base_url="http://store.local")
    )
    assert isinstance(remote, HttpDocumentStore)
