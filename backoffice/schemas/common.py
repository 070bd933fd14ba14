from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""

    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


class CamelModel(BaseModel):
    """Base model whose wire names are camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def to_patch(self) -> Dict[str, Any]:
        """Dump only the top-level fields the payload actually provided."""
        fields = type(self).model_fields
        provided = {fields[name].alias or name for name in self.model_fields_set}
        return {key: value for key, value in self.to_document().items() if key in provided}


class PageResponse(CamelModel):
    items: List[Dict[str, Any]]
    next_page_token: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    ok: bool = True
    service: Optional[str] = None
    uptime: Optional[float] = Field(default=None, description="Seconds since startup")
