from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response

from backoffice.dependencies.services import get_client_service
from backoffice.routes.common import json_body, list_params, service_errors, validation_error_response
from backoffice.schemas.client import ClientCreate, ClientUpdate
from backoffice.schemas.common import PageResponse
from backoffice.services import ClientService
from backoffice.services.pagination import ListParams
from backoffice.services.validation import validate_payload

router = APIRouter()


@router.get("", response_model=PageResponse)
async def list_clients(
    params: ListParams = Depends(list_params),
    service: ClientService = Depends(get_client_service),
):
    with service_errors():
        page = await service.list(params)
    return PageResponse(items=page.items, next_page_token=page.next_page_token)


@router.get("/{client_id}", response_model=Dict[str, Any])
async def get_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
):
    with service_errors():
        return await service.get(client_id)


@router.post("", status_code=201, response_model=Dict[str, Any])
async def create_client(
    request: Request,
    service: ClientService = Depends(get_client_service),
):
    result = validate_payload(ClientCreate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.create(result.value)


@router.put("/{client_id}", response_model=Dict[str, Any])
async def update_client(
    client_id: str,
    request: Request,
    service: ClientService = Depends(get_client_service),
):
    result = validate_payload(ClientUpdate, await json_body(request))
    if not result.ok:
        return validation_error_response(result.details)
    with service_errors():
        return await service.update(client_id, result.value)


@router.delete("/{client_id}", status_code=204)
async def delete_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
):
    with service_errors():
        await service.delete(client_id)
    return Response(status_code=204)
