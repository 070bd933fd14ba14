from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backoffice.config import Settings
from backoffice.main import create_app
from backoffice.services.memory_store import InMemoryDocumentStore


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def client(store: InMemoryDocumentStore) -> TestClient:
    app = create_app(Settings(use_mock_data=True), store=store)
    return TestClient(app)


@pytest.fixture
def client_payload() -> dict:
    address = {
        "street": "12 Harbour Road",
        "city": "Hosur",
        "state": "Tamil Nadu",
        "postalCode": "635109",
        "country": "India",
    }
    return {
        "company": "Acme Components",
        "contactPerson": "Priya Raman",
        "email": "priya@acme-components.com",
        "phone": "+91 90000 00000",
        "status": "active",
        "gstNumber": "33ABCDE1234F1Z5",
        "billingAddress": address,
        "shippingAddress": dict(address),
        "baseCurrency": "INR",
    }
