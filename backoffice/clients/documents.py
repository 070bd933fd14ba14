from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

import httpx

from backoffice.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class DocumentStore(Protocol):
    """Collection/document operations every store adapter provides.

    Documents are plain dicts carrying their store-assigned ``id`` key.
    """

    async def list(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> List[Document]: ...

    async def get(self, collection: str, document_id: str) -> Optional[Document]: ...

    async def add(self, collection: str, data: Mapping[str, Any]) -> Document: ...

    async def set(
        self,
        collection: str,
        document_id: str,
        data: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> Document: ...

    async def delete(self, collection: str, document_id: str) -> bool: ...

    async def close(self) -> None: ...


class HttpDocumentStore:
    """Async HTTP client for a remote document database.

    The remote service exposes ``/collections/{collection}/documents`` with
    GET (list), POST (add) and ``/{id}`` with GET, PUT (``?merge=``) and DELETE.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/")
        self._timeout = timeout
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _path(collection: str, document_id: str | None = None) -> str:
        path = f"/collections/{collection}/documents"
        if document_id is not None:
            path = f"{path}/{document_id}"
        return path

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
        allow_missing: bool = False,
    ) -> Optional[Any]:
        client = self._ensure_client()
        try:
            response = await client.request(
                method,
                path,
                params=params,
                json=dict(payload) if payload is not None else None,
            )
            if allow_missing and response.status_code == 404:
                return None
            response.raise_for_status()
            if response.status_code == 204 or not response.content:
                return {}
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.exception("Document store returned error %s", exc.response.status_code)
            raise DownstreamServiceError(
                "Document store returned an error response",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach document store: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach document store", status_code=None, cause=exc
            ) from exc

    async def list(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> List[Document]:
        params: Dict[str, Any] = {}
        if order_by:
            params["orderBy"] = order_by
            params["direction"] = "desc" if descending else "asc"
        if limit is not None:
            params["limit"] = limit
        for field, value in (where or {}).items():
            params[f"where.{field}"] = value
        data = await self._request("GET", self._path(collection), params=params)
        return list(data.get("documents", []))

    async def get(self, collection: str, document_id: str) -> Optional[Document]:
        return await self._request(
            "GET", self._path(collection, document_id), allow_missing=True
        )

    async def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        return await self._request("POST", self._path(collection), payload=data)

    async def set(
        self,
        collection: str,
        document_id: str,
        data: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> Document:
        return await self._request(
            "PUT",
            self._path(collection, document_id),
            params={"merge": "true" if merge else "false"},
            payload=data,
        )

    async def delete(self, collection: str, document_id: str) -> bool:
        result = await self._request(
            "DELETE", self._path(collection, document_id), allow_missing=True
        )
        return result is not None
