"""Mapper functions to convert between domain entities and stored JSON.

This layer isolates the serialized shape (camelCase keys, ISO dates, amounts
as decimal strings) from the domain entities, so the stored format can change
without touching business logic.
"""

import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from payminder.domain import entities as domain


class RecordDecodeError(ValueError):
    """A stored value could not be decoded into domain entities."""


def user_to_record(user: domain.User) -> dict[str, Any]:
    """Convert User entity to a JSON-ready dict."""
    record: dict[str, Any] = {"id": user.id, "name": user.name, "email": user.email}
    if user.address is not None:
        record["address"] = user.address
    return record


def user_from_record(record: dict[str, Any]) -> domain.User:
    """Convert a stored dict to a User entity."""
    try:
        return domain.User(
            id=str(record["id"]),
            name=str(record["name"]),
            email=str(record["email"]),
            address=record.get("address"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise RecordDecodeError(f"Invalid user record: {e}") from e


def payment_to_record(payment: domain.Payment) -> dict[str, Any]:
    """Convert Payment entity to a JSON-ready dict."""
    return {
        "id": payment.id,
        "title": payment.title,
        "description": payment.description,
        "dueDate": payment.due_date.isoformat(),
        "amount": str(payment.amount),
        "isPaid": payment.is_paid,
        "isArchived": payment.is_archived,
        "createdAt": payment.created_at.isoformat(),
    }


def payment_from_record(record: dict[str, Any]) -> domain.Payment:
    """Convert a stored dict to a Payment entity.

    Accepts amounts stored as JSON numbers or strings. Records that break a
    Payment invariant (blank title, negative amount, non-boolean flags) are
    rejected.
    """
    try:
        return domain.Payment(
            id=str(record["id"]),
            title=_title(record["title"]),
            description=str(record.get("description") or ""),
            due_date=date.fromisoformat(str(record["dueDate"])[:10]),
            amount=_amount(record["amount"]),
            is_paid=_flag(record, "isPaid"),
            is_archived=_flag(record, "isArchived"),
            created_at=datetime.fromisoformat(str(record["createdAt"])),
        )
    except (KeyError, TypeError, AttributeError, ValueError, InvalidOperation) as e:
        raise RecordDecodeError(f"Invalid payment record: {e}") from e


def _title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"title must be a non-empty string (got {value!r})")
    return value


def _amount(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"amount must be a number (got {value!r})")
    amount = Decimal(str(value))
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"amount must be a non-negative number (got {value!r})")
    return amount


def _flag(record: dict[str, Any], key: str) -> bool:
    value = record.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean (got {value!r})")
    return value


def dump_user(user: domain.User) -> str:
    """Serialize a User for the store."""
    return json.dumps(user_to_record(user))


def load_user(raw: str) -> domain.User:
    """Deserialize a User from the store."""
    try:
        record = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RecordDecodeError(f"User record is not valid JSON: {e}") from e
    if not isinstance(record, dict):
        raise RecordDecodeError("User record is not an object")
    return user_from_record(record)


def dump_payments(payments: list[domain.Payment]) -> str:
    """Serialize an ordered list of payments for the store."""
    return json.dumps([payment_to_record(p) for p in payments])


def load_payments(raw: str) -> list[domain.Payment]:
    """Deserialize an ordered list of payments from the store."""
    try:
        records = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RecordDecodeError(f"Payments record is not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise RecordDecodeError("Payments record is not a list")
    payments = []
    for record in records:
        if not isinstance(record, dict):
            raise RecordDecodeError("Payment entry is not an object")
        payments.append(payment_from_record(record))
    return payments
