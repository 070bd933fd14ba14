from typing import List, Literal, Optional

from pydantic import ConfigDict, Field, field_validator

from backoffice.schemas.common import CamelModel, parse_iso_datetime, to_iso

InvoiceStatus = Literal["draft", "sent", "paid", "overdue"]


def _normalize_datetime(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError("Expected an ISO-8601 date string")
    return to_iso(parse_iso_datetime(value))


class InvoiceItem(CamelModel):
    """Snapshot of a purchase line; unknown keys are kept as sent."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    purchase_id: Optional[str] = None
    po_number: Optional[str] = None


class _InvoiceFields(CamelModel):
    @field_validator("due_date", "paid_at", mode="before", check_fields=False)
    @classmethod
    def _iso_dates(cls, value):
        return _normalize_datetime(value)

    @field_validator("payment_terms", mode="before", check_fields=False)
    @classmethod
    def _terms_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value


class InvoiceCreate(_InvoiceFields):
    client_id: str = Field(min_length=1)
    purchase_id: Optional[str] = None
    purchase_ids: List[str] = Field(default_factory=list)
    invoice_number: Optional[str] = None
    po_number: Optional[str] = None
    date: Optional[str] = None
    due_date: Optional[str] = None
    status: InvoiceStatus = "draft"
    items: List[InvoiceItem] = Field(default_factory=list)
    subtotal: float = Field(default=0.0, ge=0)
    tax: float = Field(default=0.0, ge=0)
    total: float = Field(default=0.0, ge=0)
    payment_terms: str = "30"
    notes: str = ""
    base_currency: Optional[str] = None
    paid_at: Optional[str] = None


class InvoiceUpdate(_InvoiceFields):
    client_id: Optional[str] = Field(default=None, min_length=1)
    purchase_id: Optional[str] = None
    purchase_ids: Optional[List[str]] = None
    invoice_number: Optional[str] = None
    po_number: Optional[str] = None
    date: Optional[str] = None
    due_date: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    items: Optional[List[InvoiceItem]] = None
    subtotal: Optional[float] = Field(default=None, ge=0)
    tax: Optional[float] = Field(default=None, ge=0)
    total: Optional[float] = Field(default=None, ge=0)
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    base_currency: Optional[str] = None
    paid_at: Optional[str] = None


class InvoiceStatusUpdate(CamelModel):
    status: InvoiceStatus


class InvoiceStats(CamelModel):
    total_invoices: int = 0
    total_revenue: float = 0.0
    paid_invoices: int = 0
    paid_revenue: float = 0.0
    pending_invoices: int = 0
    pending_revenue: float = 0.0
    overdue_invoices: int = 0
    overdue_revenue: float = 0.0
    from_: str = Field(alias="from")
    to: str
