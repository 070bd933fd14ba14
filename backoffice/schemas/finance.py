from typing import Annotated, Literal, Optional

from pydantic import BeforeValidator, Field

from backoffice.schemas.common import CamelModel, PageResponse, parse_iso_datetime, to_iso

FinanceType = Literal["invested", "expense", "tds"]
FinanceStatus = Literal["completed", "pending", "failed"]


def _coerce_amount(value):
    # Blank or missing amounts count as zero.
    if value is None or value == "":
        return 0.0
    return value


def _coerce_date(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError("Expected an ISO-8601 date string")
    return to_iso(parse_iso_datetime(value))


Amount = Annotated[float, BeforeValidator(_coerce_amount)]
RecordDate = Annotated[Optional[str], BeforeValidator(_coerce_date)]


class FinanceRecordCreate(CamelModel):
    type: FinanceType
    category: str = Field(min_length=1)
    amount: Amount = 0.0
    description: str = ""
    date: RecordDate = None
    payment_method: str = ""
    status: FinanceStatus = "completed"
    reference: Optional[str] = None
    tax_year: Optional[str] = None


class FinanceRecordUpdate(CamelModel):
    type: Optional[FinanceType] = None
    category: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Amount] = None
    description: Optional[str] = None
    date: RecordDate = None
    payment_method: Optional[str] = None
    status: Optional[FinanceStatus] = None
    reference: Optional[str] = None
    tax_year: Optional[str] = None


class FinanceStats(CamelModel):
    total_invested: float = 0.0
    total_expenses: float = 0.0
    total_tds: float = Field(default=0.0, alias="totalTDS")
    profit: float = 0.0


class FinancePageResponse(PageResponse):
    total: int = 0
