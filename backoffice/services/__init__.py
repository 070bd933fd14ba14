"""Service package public API definitions.

Service implementations are imported lazily on first attribute access so that
``backoffice.clients.documents`` can import ``backoffice.services.exceptions``
without pulling in the services that depend on the store client.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "ClientService",
    "FinanceService",
    "InvoiceService",
    "PurchaseService",
    "SettingsService",
]

_SERVICE_MODULES = {
    "ClientService": "clients",
    "FinanceService": "finance",
    "InvoiceService": "invoices",
    "PurchaseService": "purchases",
    "SettingsService": "settings",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .clients import ClientService as ClientService
    from .finance import FinanceService as FinanceService
    from .invoices import InvoiceService as InvoiceService
    from .purchases import PurchaseService as PurchaseService
    from .settings import SettingsService as SettingsService
