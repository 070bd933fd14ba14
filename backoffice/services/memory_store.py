from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, DefaultDict, Dict, List, Mapping, Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _deep_merge(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def _sort_key(value: Any) -> tuple:
    # Missing values sort before present ones.
    if value is None:
        return (0, "")
    return (1, value)


class InMemoryDocumentStore:
    """Document store kept in process memory, used for development and tests."""

    def __init__(self) -> None:
        self._collections: DefaultDict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)

    @staticmethod
    def _next_id() -> str:
        return uuid.uuid4().hex[:20]

    @staticmethod
    def _snapshot(document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        return {"id": document_id, **copy.deepcopy(dict(data))}

    async def list(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        rows = [
            self._snapshot(document_id, data)
            for document_id, data in self._collections[collection].items()
            if all(data.get(field) == value for field, value in (where or {}).items())
        ]
        if order_by:
            rows.sort(key=lambda row: _sort_key(row.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        data = self._collections[collection].get(document_id)
        return self._snapshot(document_id, data) if data is not None else None

    async def add(self, collection: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        document_id = self._next_id()
        stored = copy.deepcopy(dict(data))
        stored.pop("id", None)
        self._collections[collection][document_id] = stored
        return self._snapshot(document_id, stored)

    async def set(
        self,
        collection: str,
        document_id: str,
        data: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> Dict[str, Any]:
        incoming = {key: value for key, value in data.items() if key != "id"}
        documents = self._collections[collection]
        if merge and document_id in documents:
            stored = _deep_merge(documents[document_id], incoming)
        else:
            stored = copy.deepcopy(incoming)
            documents[document_id] = stored
        return self._snapshot(document_id, stored)

    async def delete(self, collection: str, document_id: str) -> bool:
        return self._collections[collection].pop(document_id, None) is not None

    async def close(self) -> None:
        return None

    def clear(self) -> None:
        self._collections.clear()
