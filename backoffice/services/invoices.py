from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

from backoffice.schemas.common import parse_iso_datetime, to_iso
from backoffice.schemas.invoice import InvoiceCreate, InvoiceStats, InvoiceUpdate
from backoffice.services.exceptions import InvalidQueryError, RecordNotFoundError
from backoffice.services.memory_store import utc_now_iso
from backoffice.services.pagination import ListParams, Page, paginate
from backoffice.services.records import CollectionService, assign_item_ids

logger = logging.getLogger(__name__)

COUNTERS_COLLECTION = "meta"
COUNTERS_DOCUMENT = "counters"
STATS_WINDOW = timedelta(days=30)


def to_invoice(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Shape a stored invoice, filling defaults for documents written loosely."""

    created_at = document.get("createdAt") or utc_now_iso()
    invoice = dict(document)
    invoice.update(
        {
            "purchaseIds": document.get("purchaseIds") or [],
            "status": document.get("status") or "draft",
            "createdAt": created_at,
            "updatedAt": document.get("updatedAt") or created_at,
            "dueDate": document.get("dueDate") or created_at,
            "items": document.get("items") or [],
            "subtotal": document.get("subtotal") or 0,
            "tax": document.get("tax") or 0,
            "total": document.get("total") or 0,
            "notes": document.get("notes") or "",
            "paymentTerms": document.get("paymentTerms") or "30",
        }
    )
    return invoice


def _parse_bound(value: Optional[str], field: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_iso_datetime(value)
    except ValueError as exc:
        raise InvalidQueryError(f"Invalid date for {field}: {value!r}", field) from exc


def summarize_invoices(
    invoices: Iterable[Mapping[str, Any]], start: datetime, end: datetime
) -> InvoiceStats:
    stats = InvoiceStats(from_=to_iso(start), to=to_iso(end))
    for invoice in invoices:
        total = float(invoice.get("total") or 0)
        status = invoice.get("status")
        stats.total_invoices += 1
        stats.total_revenue += total
        if status == "paid":
            stats.paid_invoices += 1
            stats.paid_revenue += total
        elif status in ("sent", "draft"):
            stats.pending_invoices += 1
            stats.pending_revenue += total
        elif status == "overdue":
            stats.overdue_invoices += 1
            stats.overdue_revenue += total
    return stats


class InvoiceService(CollectionService):
    collection = "invoices"

    async def next_invoice_number(self, now: datetime | None = None) -> str:
        """Advance the per-year counter and format ``INV-<year>-<seq>``.

        The read and the write are separate store calls; concurrent creates
        can race on the counter.
        """

        year = str((now or datetime.now(timezone.utc)).year)
        counters = await self._store.get(COUNTERS_COLLECTION, COUNTERS_DOCUMENT) or {}
        by_year = counters.get("invoiceSeqByYear") or {}
        sequence = int(by_year.get(year) or 0) + 1
        global_sequence = int(counters.get("invoiceSeq") or 0) + 1
        await self._store.set(
            COUNTERS_COLLECTION,
            COUNTERS_DOCUMENT,
            {"invoiceSeq": global_sequence, "invoiceSeqByYear": {year: sequence}},
            merge=True,
        )
        return f"INV-{year}-{sequence:04d}"

    @staticmethod
    def _item_documents(payload: InvoiceCreate | InvoiceUpdate) -> list[Dict[str, Any]]:
        items = [item.model_dump(by_alias=True, exclude_none=True, mode="json") for item in payload.items or []]
        return assign_item_ids(items)

    async def list(
        self,
        params: ListParams,
        *,
        status: str | None = None,
        client_id: str | None = None,
        order: str = "desc",
    ) -> Page[Dict[str, Any]]:
        where = {"status": status, "clientId": client_id}
        documents = await self._store.list(
            self.collection,
            where={field: value for field, value in where.items() if value},
            order_by="createdAt",
            descending=order != "asc",
        )
        invoices = [to_invoice(document) for document in documents]
        return paginate(invoices, params.limit, params.page_token)

    async def get(self, document_id: str) -> Dict[str, Any]:
        return to_invoice(await super().get(document_id))

    async def create(self, payload: InvoiceCreate) -> Dict[str, Any]:
        now = utc_now_iso()
        data = payload.to_document()
        data["items"] = self._item_documents(payload)
        data["dueDate"] = data.get("dueDate") or now
        number = (payload.invoice_number or "").strip()
        data["invoiceNumber"] = number or await self.next_invoice_number()
        document = await self._store.add(
            self.collection, {**data, "createdAt": now, "updatedAt": now}
        )
        logger.info("Created invoice %s (%s)", document["id"], data["invoiceNumber"])
        return to_invoice(document)

    async def update(self, document_id: str, payload: InvoiceUpdate) -> Dict[str, Any]:
        existing = await self._store.get(self.collection, document_id)
        if existing is None:
            raise RecordNotFoundError(self.collection, document_id)

        patch = payload.to_patch()
        if payload.items is not None:
            patch["items"] = self._item_documents(payload)
        number = (payload.invoice_number or "").strip()
        if number:
            patch["invoiceNumber"] = number
        else:
            patch.pop("invoiceNumber", None)
            if not existing.get("invoiceNumber"):
                patch["invoiceNumber"] = await self.next_invoice_number()
        patch["updatedAt"] = utc_now_iso()

        document = await self._store.set(self.collection, document_id, patch, merge=True)
        return to_invoice(document)

    async def set_status(self, document_id: str, status: str) -> Dict[str, Any]:
        if await self._store.get(self.collection, document_id) is None:
            raise RecordNotFoundError(self.collection, document_id)
        logger.info("Invoice %s status -> %s", document_id, status)
        document = await self._store.set(
            self.collection,
            document_id,
            {"status": status, "updatedAt": utc_now_iso()},
            merge=True,
        )
        return to_invoice(document)

    async def stats(
        self,
        *,
        date_from: str | None = None,
        date_to: str | None = None,
        client_id: str | None = None,
    ) -> InvoiceStats:
        end = _parse_bound(date_to, "dateTo") or datetime.now(timezone.utc)
        start = _parse_bound(date_from, "dateFrom") or end - STATS_WINDOW

        documents = await self._store.list(
            self.collection,
            where={"clientId": client_id} if client_id else None,
            order_by="createdAt",
            descending=True,
        )
        in_window = []
        for document in documents:
            created_at = document.get("createdAt")
            if not isinstance(created_at, str):
                continue
            try:
                created = parse_iso_datetime(created_at)
            except ValueError:
                logger.warning("Skipping invoice %s with bad createdAt %r", document.get("id"), created_at)
                continue
            if start <= created <= end:
                in_window.append(to_invoice(document))
        return summarize_invoices(in_window, start, end)
