"""Tagged validation results for untyped request bodies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

_REQUEST_SECTIONS = ("body", "query", "path", "header", "cookie")


@dataclass
class ValidationDetails:
    form_errors: List[str] = field(default_factory=list)
    field_errors: Dict[str, List[str]] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {"formErrors": list(self.form_errors), "fieldErrors": dict(self.field_errors)}


@dataclass
class ValidationResult(Generic[M]):
    value: Optional[M] = None
    details: Optional[ValidationDetails] = None

    @property
    def ok(self) -> bool:
        return self.details is None


def flatten_errors(errors: Iterable[Dict[str, Any]]) -> ValidationDetails:
    """Group pydantic error entries by their top-level field.

    Errors without a location (wrong body type, model-level checks) are form
    errors. Nested locations are reported under their first segment.
    """

    details = ValidationDetails()
    for error in errors:
        location = list(error.get("loc", ()))
        if location and location[0] in _REQUEST_SECTIONS:
            location = location[1:]
        message = str(error.get("msg", "Invalid value"))
        if not location:
            details.form_errors.append(message)
            continue
        details.field_errors.setdefault(str(location[0]), []).append(message)
    return details


def validate_payload(model: Type[M], payload: Any) -> ValidationResult[M]:
    if not isinstance(payload, dict):
        return ValidationResult(
            details=ValidationDetails(form_errors=["Expected a JSON object"])
        )
    try:
        return ValidationResult(value=model.model_validate(payload))
    except ValidationError as exc:
        return ValidationResult(details=flatten_errors(exc.errors()))
