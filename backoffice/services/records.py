from __future__ import annotations

import logging
import time
from typing import Any, ClassVar, Dict, Iterable, List, Mapping

from backoffice.clients.documents import DocumentStore
from backoffice.schemas.common import CamelModel
from backoffice.services.exceptions import RecordNotFoundError
from backoffice.services.memory_store import utc_now_iso
from backoffice.services.pagination import ListParams, Page, paginate

logger = logging.getLogger(__name__)


def assign_item_ids(items: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Give every line item an id, keeping ids the caller already set."""

    stamp = int(time.time() * 1000)
    return [
        {**item, "id": item.get("id") or f"{stamp}-{index}"}
        for index, item in enumerate(items)
    ]


class CollectionService:
    """Plain CRUD over one collection, newest first."""

    collection: ClassVar[str]

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def list(self, params: ListParams) -> Page[Dict[str, Any]]:
        documents = await self._store.list(self.collection, order_by="createdAt", descending=True)
        return paginate(documents, params.limit, params.page_token)

    async def get(self, document_id: str) -> Dict[str, Any]:
        document = await self._store.get(self.collection, document_id)
        if document is None:
            raise RecordNotFoundError(self.collection, document_id)
        return document

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return data

    async def create(self, payload: CamelModel) -> Dict[str, Any]:
        now = utc_now_iso()
        data = self._prepare(payload.to_document())
        document = await self._store.add(
            self.collection, {**data, "createdAt": now, "updatedAt": now}
        )
        logger.info("Created %s/%s", self.collection, document["id"])
        return document

    async def update(self, document_id: str, payload: CamelModel) -> Dict[str, Any]:
        await self.get(document_id)
        patch = {**self._prepare(payload.to_patch()), "updatedAt": utc_now_iso()}
        return await self._store.set(self.collection, document_id, patch, merge=True)

    async def delete(self, document_id: str) -> None:
        if not await self._store.delete(self.collection, document_id):
            raise RecordNotFoundError(self.collection, document_id)
        logger.info("Deleted %s/%s", self.collection, document_id)
