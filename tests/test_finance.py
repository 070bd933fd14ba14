import asyncio

import pytest

from backoffice.schemas.finance import FinanceRecordCreate, FinanceRecordUpdate
from backoffice.services.exceptions import RecordNotFoundError
from backoffice.services.finance import (
    FinanceFilters,
    FinanceService,
    compute_finance_stats,
    matches_search,
    to_finance_record,
)
from backoffice.services.pagination import ListParams


def _record(type_: str, amount: float, status: str = "completed", **extra) -> dict:
    return {"type": type_, "amount": amount, "status": status, **extra}


def test_profit_is_invested_minus_expenses_and_tds() -> None:
    stats = compute_finance_stats(
        [_record("invested", 100), _record("expense", 40), _record("tds", 10)]
    )

    assert stats.total_invested == 100
    assert stats.total_expenses == 40
    assert stats.total_tds == 10
    assert stats.profit == 50


def test_only_completed_records_contribute() -> None:
    stats = compute_finance_stats(
        [
            _record("tds", 25, status="pending"),
            _record("tds", 5),
            _record("expense", 70, status="failed"),
            _record("invested", 30, status="pending"),
        ]
    )

    assert stats.total_tds == 5
    assert stats.total_expenses == 0
    assert stats.total_invested == 0
    assert stats.profit == -5


def test_search_is_case_insensitive_across_fields() -> None:
    record = to_finance_record(
        {
            "id": "f1",
            "type": "expense",
            "category": "Office Rent",
            "amount": 1200,
            "description": "March rent",
            "paymentMethod": "Bank Transfer",
            "reference": "NEFT-9931",
            "createdAt": "2025-03-01T00:00:00+00:00",
        }
    )

    assert matches_search(record, "RENT")
    assert matches_search(record, "bank")
    assert matches_search(record, "neft-99")
    assert not matches_search(record, "salary")


def test_to_finance_record_fills_defaults() -> None:
    record = to_finance_record({"id": "f2", "type": "invested", "amount": "not a number", "createdAt": "2025-01-01T00:00:00+00:00"})

    assert record["amount"] == 0.0
    assert record["status"] == "completed"
    assert record["date"] == "2025-01-01T00:00:00+00:00"
    assert record["updatedAt"] == "2025-01-01T00:00:00+00:00"
    assert record["description"] == ""


def test_service_filters_before_aggregating(store) -> None:
    service = FinanceService(store)
    for payload in (
        {"type": "invested", "category": "Capital", "amount": "5000", "paymentMethod": "Bank"},
        {"type": "expense", "category": "Travel", "amount": 800, "paymentMethod": "Card"},
        {"type": "expense", "category": "Rent", "amount": 1500, "paymentMethod": "Bank"},
        {"type": "tds", "category": "TDS", "amount": 300, "status": "pending", "paymentMethod": "Bank"},
    ):
        asyncio.run(service.create(FinanceRecordCreate.model_validate(payload)))

    everything = asyncio.run(service.stats(FinanceFilters()))
    bank_only = asyncio.run(service.stats(FinanceFilters(payment_method="Bank")))
    travel = asyncio.run(service.stats(FinanceFilters(search="trav")))

    assert everything.profit == 5000 - 800 - 1500
    assert everything.total_tds == 0
    assert bank_only.total_expenses == 1500
    assert travel.total_expenses == 800
    assert travel.total_invested == 0


def test_service_list_pages_filtered_records(store) -> None:
    service = FinanceService(store)
    for amount in range(5):
        asyncio.run(
            service.create(
                FinanceRecordCreate(type="expense", category="Supplies", amount=amount)
            )
        )
    asyncio.run(service.create(FinanceRecordCreate(type="invested", category="Capital", amount=10)))

    page, total = asyncio.run(
        service.list(ListParams(limit=3), FinanceFilters(type="expense"))
    )

    assert total == 5
    assert len(page.items) == 3
    assert page.next_page_token is not None
    assert all(item["type"] == "expense" for item in page.items)


def test_update_and_delete_missing_record_raise(store) -> None:
    service = FinanceService(store)
    created = asyncio.run(
        service.create(FinanceRecordCreate(type="expense", category="Travel", amount=10))
    )

    updated = asyncio.run(
        service.update(created["id"], FinanceRecordUpdate.model_validate({"amount": "42.5", "status": "failed"}))
    )
    assert updated["amount"] == 42.5
    assert updated["status"] == "failed"
    assert updated["category"] == "Travel"

    with pytest.raises(RecordNotFoundError):
        asyncio.run(service.update("missing", FinanceRecordUpdate(amount=1)))
    with pytest.raises(RecordNotFoundError):
        asyncio.run(service.delete("missing"))
