from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from backoffice.dependencies.services import get_finance_service
from backoffice.routes.common import json_body, list_params, service_errors, validation_error_response
from backoffice.schemas.finance import (
    FinancePageResponse,
    FinanceRecordCreate,
    FinanceRecordUpdate,
    FinanceStats,
)
from backoffice.services import FinanceService
from backoffice.services.finance import FinanceFilters
from backoffice.services.pagination import ListParams
from backoffice.services.validation import validate_payload

router = APIRouter()


def finance_filters(
    search: Optional[str] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    payment_method: Optional[str] = Query(default=None, alias="paymentMethod"),
) -> FinanceFilters:
    return FinanceFilters(
        search=search,
        type=type,
        category=category,
        status=status,
        payment_method=payment_method,
    )


@router.get("/stats", response_model=FinanceStats)
async def finance_stats(
    filters: FinanceFilters = Depends(finance_filters),
    service: FinanceService = Depends(get_finance_service),
):
    with service_errors():
        return await service.stats(filters)


@router.get("", response_model=FinancePageResponse)
async def list_finance_records(
    params: ListParams = Depends(list_params),
    filters: FinanceFilters = Depends(finance_filters),
    order: Optional[str] = None,
    service: FinanceService = Depends(get_finance_service),
):
    with service_errors():
        page, total = await service.list(params, filters, order=order or "desc")
    return FinancePageResponse(items=page.items, next_page_token=page.next_page_token, total=total)


@router.get("/{record_id}", response_model=Dict[str, Any])
async def get_finance_record(
    record_id: str,
    service: FinanceService = Depends(get_finance_service),
):
    with service_errors():
        return await service.get(record_id)


@router.post("", status_code=201, response_model=Dict[str, Any])
async def create_finance_record(
    request: Request,
    service: FinanceService = Depends(get_finance_service),
):
    result = validate_payload(FinanceRecordCreate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.create(result.value)


@router.api_route("/{record_id}", methods=["PUT", "PATCH"], response_model=Dict[str, Any])
async def update_finance_record(
    record_id: str,
    request: Request,
    service: FinanceService = Depends(get_finance_service),
):
    result = validate_payload(FinanceRecordUpdate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.update(record_id, result.value)


@router.delete("/{record_id}", status_code=204)
async def delete_finance_record(
    record_id: str,
    service: FinanceService = Depends(get_finance_service),
):
    with service_errors():
        await service.delete(record_id)
    return Response(status_code=204)
