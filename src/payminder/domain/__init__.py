"""Domain layer for payminder application."""

import importlib

# Services import the storage mappers, which import domain.entities, so
# exports resolve lazily to avoid circular imports.
_EXPORTS = {
    "SessionService": "payminder.domain.session",
    "PaymentLedger": "payminder.domain.ledger",
    "LedgerEvent": "payminder.domain.ledger",
    "LedgerEventKind": "payminder.domain.ledger",
    "NotificationFeed": "payminder.domain.notifications",
    "PermissionState": "payminder.domain.permissions",
    "StoredPermission": "payminder.domain.permissions",
    "NotificationScheduler": "payminder.domain.scheduler",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    if name in _EXPORTS:
        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
