from __future__ import annotations

import logging

from fastapi import Depends, Request

from backoffice.clients.documents import DocumentStore, HttpDocumentStore
from backoffice.config import Settings
from backoffice.services import (
    ClientService,
    FinanceService,
    InvoiceService,
    PurchaseService,
    SettingsService,
)
from backoffice.services.memory_store import InMemoryDocumentStore

logger = logging.getLogger(__name__)


def build_document_store(settings: Settings) -> DocumentStore:
    """Construct the store adapter selected by configuration."""

    if settings.use_mock_data or not settings.store_base_url:
        logger.info("Using in-memory document store")
        return InMemoryDocumentStore()
    logger.info("Using remote document store at %s", settings.store_base_url)
    return HttpDocumentStore(
        str(settings.store_base_url),
        timeout=settings.store_timeout,
        token=settings.store_token,
    )


def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Document store not configured")
    return store


def get_client_service(store: DocumentStore = Depends(get_store)) -> ClientService:
    return ClientService(store)


def get_purchase_service(store: DocumentStore = Depends(get_store)) -> PurchaseService:
    return PurchaseService(store)


def get_invoice_service(store: DocumentStore = Depends(get_store)) -> InvoiceService:
    return InvoiceService(store)


def get_finance_service(store: DocumentStore = Depends(get_store)) -> FinanceService:
    return FinanceService(store)


def get_settings_service(store: DocumentStore = Depends(get_store)) -> SettingsService:
    return SettingsService(store)
