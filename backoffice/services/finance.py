from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from backoffice.clients.documents import DocumentStore
from backoffice.schemas.finance import FinanceRecordCreate, FinanceRecordUpdate, FinanceStats
from backoffice.services.coercion import to_number
from backoffice.services.exceptions import RecordNotFoundError
from backoffice.services.memory_store import utc_now_iso
from backoffice.services.pagination import ListParams, Page, paginate

logger = logging.getLogger(__name__)

COLLECTION = "finance"


@dataclass(frozen=True)
class FinanceFilters:
    search: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None

    def equality(self) -> Dict[str, str]:
        where = {
            "type": self.type,
            "category": self.category,
            "status": self.status,
            "paymentMethod": self.payment_method,
        }
        return {field: value for field, value in where.items() if value}


def to_finance_record(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Shape a stored finance document, filling in defaults for loose fields."""

    created_at = document.get("createdAt") or utc_now_iso()
    amount = to_number(document.get("amount") or 0)
    return {
        "id": document.get("id"),
        "type": document.get("type"),
        "category": document.get("category") or "",
        "amount": amount if math.isfinite(amount) else 0.0,
        "description": document.get("description") or "",
        "date": document.get("date") or created_at,
        "paymentMethod": document.get("paymentMethod") or "",
        "status": document.get("status") or "completed",
        "reference": document.get("reference"),
        "taxYear": document.get("taxYear"),
        "createdAt": created_at,
        "updatedAt": document.get("updatedAt") or created_at,
    }


def matches_search(record: Mapping[str, Any], search: str) -> bool:
    needle = search.lower()
    haystacks = (
        record.get("description"),
        record.get("category"),
        record.get("paymentMethod"),
        record.get("reference"),
    )
    return any(needle in (value or "").lower() for value in haystacks)


def compute_finance_stats(records: Iterable[Mapping[str, Any]]) -> FinanceStats:
    """Sum completed records by type; other statuses never contribute."""

    totals = {"invested": 0.0, "expense": 0.0, "tds": 0.0}
    for record in records:
        if record.get("status") != "completed":
            continue
        kind = record.get("type")
        if kind in totals:
            totals[kind] += float(record.get("amount") or 0)

    return FinanceStats(
        total_invested=totals["invested"],
        total_expenses=totals["expense"],
        total_tds=totals["tds"],
        profit=totals["invested"] - totals["expense"] - totals["tds"],
    )


class FinanceService:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def _filtered(self, filters: FinanceFilters, *, descending: bool = True) -> List[Dict[str, Any]]:
        documents = await self._store.list(
            COLLECTION,
            where=filters.equality(),
            order_by="createdAt",
            descending=descending,
        )
        records = [to_finance_record(document) for document in documents]
        if filters.search:
            records = [record for record in records if matches_search(record, filters.search)]
        return records

    async def list(
        self,
        params: ListParams,
        filters: FinanceFilters,
        *,
        order: str = "desc",
    ) -> tuple[Page[Dict[str, Any]], int]:
        records = await self._filtered(filters, descending=order != "asc")
        logger.debug("Listing %d finance records", len(records))
        return paginate(records, params.limit, params.page_token), len(records)

    async def stats(self, filters: FinanceFilters) -> FinanceStats:
        return compute_finance_stats(await self._filtered(filters))

    async def get(self, record_id: str) -> Dict[str, Any]:
        document = await self._store.get(COLLECTION, record_id)
        if document is None:
            raise RecordNotFoundError(COLLECTION, record_id)
        return to_finance_record(document)

    async def create(self, payload: FinanceRecordCreate) -> Dict[str, Any]:
        now = utc_now_iso()
        data = payload.to_document()
        data["date"] = data.get("date") or now
        document = await self._store.add(COLLECTION, {**data, "createdAt": now, "updatedAt": now})
        logger.info("Created %s finance record %s", payload.type, document["id"])
        return to_finance_record(document)

    async def update(self, record_id: str, payload: FinanceRecordUpdate) -> Dict[str, Any]:
        if await self._store.get(COLLECTION, record_id) is None:
            raise RecordNotFoundError(COLLECTION, record_id)
        patch = {**payload.to_patch(), "updatedAt": utc_now_iso()}
        document = await self._store.set(COLLECTION, record_id, patch, merge=True)
        return to_finance_record(document)

    async def delete(self, record_id: str) -> None:
        if not await self._store.delete(COLLECTION, record_id):
            raise RecordNotFoundError(COLLECTION, record_id)
        logger.info("Deleted finance record %s", record_id)
