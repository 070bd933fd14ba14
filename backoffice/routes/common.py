from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from backoffice.services.exceptions import InvalidQueryError, RecordNotFoundError, ServiceError
from backoffice.services.pagination import ListParams, parse_list_params
from backoffice.services.validation import ValidationDetails

logger = logging.getLogger(__name__)


def list_params(request: Request) -> ListParams:
    return parse_list_params(request.query_params)


async def json_body(request: Request) -> Any:
    """Return the decoded JSON body, or ``None`` when it is empty or malformed."""

    try:
        return await request.json()
    except ValueError:
        return None


def validation_error_response(details: ValidationDetails) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "ValidationError", "details": details.as_dict()},
    )


@contextmanager
def service_errors() -> Iterator[None]:
    """Translate service exceptions into HTTP errors."""

    try:
        yield
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Not found") from exc
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ServiceError as exc:
        logger.error("Service failure: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
