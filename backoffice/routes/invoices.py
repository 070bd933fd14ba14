from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from backoffice.dependencies.services import get_invoice_service
from backoffice.routes.common import json_body, list_params, service_errors, validation_error_response
from backoffice.schemas.common import PageResponse
from backoffice.schemas.invoice import InvoiceCreate, InvoiceStats, InvoiceStatusUpdate, InvoiceUpdate
from backoffice.services import InvoiceService
from backoffice.services.pagination import ListParams
from backoffice.services.validation import validate_payload

router = APIRouter()


# Registered before "/{invoice_id}" so "stats" is not taken for an id.
@router.get("/stats", response_model=InvoiceStats)
async def invoice_stats(
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    client_id: Optional[str] = Query(default=None, alias="clientId"),
    service: InvoiceService = Depends(get_invoice_service),
):
    with service_errors():
        return await service.stats(date_from=date_from, date_to=date_to, client_id=client_id)


@router.get("", response_model=PageResponse)
async def list_invoices(
    params: ListParams = Depends(list_params),
    status: Optional[str] = None,
    client_id: Optional[str] = Query(default=None, alias="clientId"),
    order: Optional[str] = None,
    service: InvoiceService = Depends(get_invoice_service),
):
    with service_errors():
        page = await service.list(params, status=status, client_id=client_id, order=order or "desc")
    return PageResponse(items=page.items, next_page_token=page.next_page_token)


@router.get("/{invoice_id}", response_model=Dict[str, Any])
async def get_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
):
    with service_errors():
        return await service.get(invoice_id)


@router.post("", status_code=201, response_model=Dict[str, Any])
async def create_invoice(
    request: Request,
    service: InvoiceService = Depends(get_invoice_service),
):
    result = validate_payload(InvoiceCreate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.create(result.value)


@router.patch("/{invoice_id}/status", response_model=Dict[str, Any])
async def update_invoice_status(
    invoice_id: str,
    request: Request,
    service: InvoiceService = Depends(get_invoice_service),
):
    result = validate_payload(InvoiceStatusUpdate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.set_status(invoice_id, result.value.status)


@router.api_route("/{invoice_id}", methods=["PUT", "PATCH"], response_model=Dict[str, Any])
async def update_invoice(
    invoice_id: str,
    request: Request,
    service: InvoiceService = Depends(get_invoice_service),
):
    result = validate_payload(InvoiceUpdate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.update(invoice_id, result.value)


@router.delete("/{invoice_id}", status_code=204)
async def delete_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
):
    with service_errors():
        await service.delete(invoice_id)
    return Response(status_code=204)
