"""Canonical settings document: sanitizing, normalizing and persistence."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from backoffice.clients.documents import DocumentStore
from backoffice.services.coercion import clamp, parse_int, to_number
from backoffice.services.memory_store import utc_now_iso

logger = logging.getLogger(__name__)

COLLECTION = "settings"
DOCUMENT_ID = "current"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "theme": "light",
    "sidebarCollapsed": False,
    "emailNotifications": True,
    "pushNotifications": False,
    "invoiceReminders": True,
    "companyName": "FedHub Software Solutions",
    "companyEmail": "info@fedhubsoftware.com",
    "companyPhone": "+91 9003285428",
    "companyAddress": (
        "P No 69,70 Gokula Nandhana, Gokul Nagar, Hosur, Krishnagiri-DT, "
        "Tamilnadu, India-635109"
    ),
    "companyGST": "33AACCF2123P1Z5",
    "companyPAN": "AACCF2123P",
    "companyMSME": "UDYAM-TN-06-0012345",
    "defaultTaxRate": 18,
    "defaultPaymentTerms": 30,
    "invoicePrefix": "INV",
    "twoFactorAuth": False,
    "sessionTimeout": 60,
}

BOOLEAN_FIELDS = (
    "sidebarCollapsed",
    "emailNotifications",
    "pushNotifications",
    "invoiceReminders",
    "twoFactorAuth",
)
TEXT_FIELDS = ("companyName", "companyEmail", "companyPhone", "companyAddress", "invoicePrefix")
UPPERCASE_FIELDS = ("companyGST", "companyPAN", "companyMSME")

HISTORY_DEFAULT_LIMIT = 10
HISTORY_MAX_LIMIT = 50


def _compact(value: float) -> float | int:
    return int(value) if value.is_integer() else value


def sanitize_patch(body: Any) -> Dict[str, Any]:
    """Keep the recognized settings fields of ``body``, coerced and clamped.

    Unrecognized or malformed fields are dropped; this never raises.
    """

    if not isinstance(body, Mapping):
        return {}

    out: Dict[str, Any] = {}

    if body.get("theme"):
        out["theme"] = "dark" if body["theme"] == "dark" else "light"

    for name in BOOLEAN_FIELDS:
        if isinstance(body.get(name), bool):
            out[name] = body[name]

    for name in TEXT_FIELDS:
        if isinstance(body.get(name), str):
            out[name] = body[name]

    for name in UPPERCASE_FIELDS:
        if isinstance(body.get(name), str):
            out[name] = body[name].upper()

    if "defaultTaxRate" in body:
        rate = to_number(body["defaultTaxRate"])
        out["defaultTaxRate"] = _compact(max(0.0, min(100.0, rate))) if math.isfinite(rate) else 18

    if "defaultPaymentTerms" in body:
        terms = to_number(body["defaultPaymentTerms"])
        out["defaultPaymentTerms"] = max(1, math.floor(terms)) if math.isfinite(terms) else 30

    if "sessionTimeout" in body:
        timeout = to_number(body["sessionTimeout"])
        out["sessionTimeout"] = max(5, math.floor(timeout)) if math.isfinite(timeout) else 60

    return out


def _number_or_default(value: Any, default: float) -> float:
    number = to_number(value) if value is not None else float(default)
    return number if math.isfinite(number) else float(default)


def _text(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def normalize_settings(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Shape a stored settings document for output."""

    created_at = document.get("createdAt")
    updated_at = document.get("updatedAt") or created_at
    return {
        "id": document.get("id", DOCUMENT_ID),
        "theme": "dark" if document.get("theme") == "dark" else "light",
        "sidebarCollapsed": bool(document.get("sidebarCollapsed")),
        "emailNotifications": bool(document.get("emailNotifications")),
        "pushNotifications": bool(document.get("pushNotifications")),
        "invoiceReminders": bool(document.get("invoiceReminders")),
        "companyName": _text(document.get("companyName")),
        "companyEmail": _text(document.get("companyEmail")),
        "companyPhone": _text(document.get("companyPhone")),
        "companyAddress": _text(document.get("companyAddress")),
        "companyGST": _text(document.get("companyGST")),
        "companyPAN": _text(document.get("companyPAN")),
        "companyMSME": _text(document.get("companyMSME")),
        "defaultTaxRate": _compact(_number_or_default(document.get("defaultTaxRate"), 18)),
        "defaultPaymentTerms": math.floor(_number_or_default(document.get("defaultPaymentTerms"), 30)),
        "invoicePrefix": _text(document.get("invoicePrefix"), "INV"),
        "twoFactorAuth": bool(document.get("twoFactorAuth")),
        "sessionTimeout": math.floor(_number_or_default(document.get("sessionTimeout"), 60)),
        "createdAt": created_at if isinstance(created_at, str) else None,
        "updatedAt": updated_at if isinstance(updated_at, str) else None,
    }


class SettingsService:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def _ensure_current(self) -> Dict[str, Any]:
        document = await self._store.get(COLLECTION, DOCUMENT_ID)
        if document is None:
            logger.info("Creating default settings document")
            now = utc_now_iso()
            document = await self._store.set(
                COLLECTION,
                DOCUMENT_ID,
                {**DEFAULT_SETTINGS, "createdAt": now, "updatedAt": now},
                merge=True,
            )
        return document

    async def get_current(self) -> Dict[str, Any]:
        return normalize_settings(await self._ensure_current())

    async def patch(self, body: Any) -> Dict[str, Any]:
        patch = sanitize_patch(body)
        existing = await self._ensure_current()
        now = utc_now_iso()
        logger.info("Updating settings fields %s", sorted(patch))
        updated = await self._store.set(
            COLLECTION,
            DOCUMENT_ID,
            {**patch, "createdAt": existing.get("createdAt") or now, "updatedAt": now},
            merge=True,
        )
        return normalize_settings(updated)

    async def replace(self, body: Any) -> Dict[str, Any]:
        data = sanitize_patch(body)
        existing = await self._ensure_current()
        now = utc_now_iso()
        logger.info("Replacing settings document")
        updated = await self._store.set(
            COLLECTION,
            DOCUMENT_ID,
            {
                **DEFAULT_SETTINGS,
                **data,
                "createdAt": existing.get("createdAt") or now,
                "updatedAt": now,
            },
            merge=False,
        )
        return normalize_settings(updated)

    async def history(self, limit: Any = None) -> List[Dict[str, Any]]:
        parsed: Optional[int] = parse_int(limit)
        if parsed is None or parsed == 0:
            parsed = HISTORY_DEFAULT_LIMIT
        documents = await self._store.list(
            COLLECTION,
            order_by="updatedAt",
            descending=True,
            limit=clamp(parsed, 1, HISTORY_MAX_LIMIT),
        )
        return [normalize_settings(document) for document in documents]
