from fastapi import APIRouter, Depends, Request

from backoffice.dependencies.services import get_settings_service
from backoffice.routes.common import json_body, service_errors
from backoffice.schemas.settings import SettingsDocument, SettingsHistory
from backoffice.services import SettingsService

router = APIRouter()


@router.get("", response_model=SettingsDocument)
async def get_settings_document(
    service: SettingsService = Depends(get_settings_service),
):
    with service_errors():
        return await service.get_current()


@router.patch("", response_model=SettingsDocument)
async def patch_settings(
    request: Request,
    service: SettingsService = Depends(get_settings_service),
):
    """Merge the recognized fields of the body into the current settings."""
    body = await json_body(request)
    with service_errors():
        return await service.patch(body)


@router.put("", response_model=SettingsDocument)
async def replace_settings(
    request: Request,
    service: SettingsService = Depends(get_settings_service),
):
    """Replace the settings with defaults plus the recognized body fields."""
    body = await json_body(request)
    with service_errors():
        return await service.replace(body)


@router.get("/history", response_model=SettingsHistory)
async def settings_history(
    limit: str | None = None,
    service: SettingsService = Depends(get_settings_service),
):
    with service_errors():
        return SettingsHistory(items=await service.history(limit))
