from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response

from backoffice.dependencies.services import get_purchase_service
from backoffice.routes.common import json_body, list_params, service_errors, validation_error_response
from backoffice.schemas.common import PageResponse
from backoffice.schemas.purchase import PurchaseCreate, PurchaseUpdate
from backoffice.services import PurchaseService
from backoffice.services.pagination import ListParams
from backoffice.services.validation import validate_payload

router = APIRouter()


@router.get("", response_model=PageResponse)
async def list_purchases(
    params: ListParams = Depends(list_params),
    service: PurchaseService = Depends(get_purchase_service),
):
    with service_errors():
        page = await service.list(params)
    return PageResponse(items=page.items, next_page_token=page.next_page_token)


@router.get("/{purchase_id}", response_model=Dict[str, Any])
async def get_purchase(
    purchase_id: str,
    service: PurchaseService = Depends(get_purchase_service),
):
    with service_errors():
        return await service.get(purchase_id)


@router.post("", status_code=201, response_model=Dict[str, Any])
async def create_purchase(
    request: Request,
    service: PurchaseService = Depends(get_purchase_service),
):
    result = validate_payload(PurchaseCreate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.create(result.value)


@router.put("/{purchase_id}", response_model=Dict[str, Any])
async def update_purchase(
    purchase_id: str,
    request: Request,
    service: PurchaseService = Depends(get_purchase_service),
):
    result = validate_payload(PurchaseUpdate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.update(purchase_id, result.value)


@router.delete("/{purchase_id}", status_code=204)
async def delete_purchase(
    purchase_id: str,
    service: PurchaseService = Depends(get_purchase_service),
):
    with service_errors():
        await service.delete(purchase_id)
    return Response(status_code=204)
