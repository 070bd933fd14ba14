import time

from fastapi import APIRouter, Request

from backoffice.schemas.common import HealthResponse

router = APIRouter()

HEALTH_PATHS = frozenset({"/healthz", "/api/healthz"})


def _uptime(request: Request) -> float:
    started = getattr(request.app.state, "started_at", None)
    return round(time.monotonic() - started, 3) if started is not None else 0.0


@router.get("/", response_model=HealthResponse, response_model_exclude_none=True)
def service_info(request: Request):
    return HealthResponse(service=request.app.title)


@router.get("/healthz", response_model=HealthResponse, response_model_exclude_none=True)
@router.get("/api/healthz", response_model=HealthResponse, response_model_exclude_none=True)
def healthz(request: Request):
    return HealthResponse(uptime=_uptime(request))
