from typing import List, Literal, Optional

from pydantic import Field, model_validator

from backoffice.schemas.common import CamelModel

PurchaseStatus = Literal["draft", "approved", "pending", "rejected", "completed"]


class PurchaseItem(CamelModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    model: str = Field(min_length=1)
    supplier: str = ""
    quantity: int = Field(ge=0)
    unit_price: float = Field(ge=0)
    uom: str = Field(min_length=1)
    currency: str = Field(min_length=1)
    total: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _default_line_total(self) -> "PurchaseItem":
        # Supplied totals are stored as given.
        if self.total is None:
            self.total = round(self.quantity * self.unit_price, 2)
        return self


class PurchaseCreate(CamelModel):
    client_id: str = Field(min_length=1)
    po_number: str = Field(min_length=1)
    date: Optional[str] = None
    status: PurchaseStatus
    items: List[PurchaseItem] = Field(min_length=1)
    subtotal: float = Field(ge=0)
    tax: float = Field(ge=0)
    total: float = Field(ge=0)
    base_currency: str = Field(min_length=1)
    notes: str = ""


class PurchaseUpdate(CamelModel):
    client_id: Optional[str] = Field(default=None, min_length=1)
    po_number: Optional[str] = Field(default=None, min_length=1)
    date: Optional[str] = None
    status: Optional[PurchaseStatus] = None
    items: Optional[List[PurchaseItem]] = Field(default=None, min_length=1)
    subtotal: Optional[float] = Field(default=None, ge=0)
    tax: Optional[float] = Field(default=None, ge=0)
    total: Optional[float] = Field(default=None, ge=0)
    base_currency: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None
