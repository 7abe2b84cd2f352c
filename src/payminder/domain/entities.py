"""Domain model entities for payminder.

These are pure data classes representing the user, their payments and the
notifications raised about them, independent of how the key-value store
serializes them.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class PaymentState(str, Enum):
    """Lifecycle state derived from a payment's flags."""

    ACTIVE = "active"
    PAID = "paid"
    ARCHIVED = "archived"


class NotificationType(str, Enum):
    """Kind of in-app notification."""

    OVERDUE = "overdue"
    DUE_SOON = "dueSoon"
    REMINDER = "reminder"
    PAYMENT_ADDED = "paymentAdded"


@dataclass(frozen=True)
class User:
    """Signed-in user domain entity."""

    id: str
    name: str
    email: str
    address: Optional[str] = None


@dataclass(frozen=True)
class Payment:
    """Payment domain entity."""

    id: str
    title: str
    description: str
    due_date: date
    amount: Decimal
    is_paid: bool
    is_archived: bool
    created_at: datetime

    @property
    def state(self) -> PaymentState:
        """Lifecycle state. Archived takes precedence over paid."""
        if self.is_archived:
            return PaymentState.ARCHIVED
        if self.is_paid:
            return PaymentState.PAID
        return PaymentState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state is PaymentState.ACTIVE


@dataclass(frozen=True)
class Notification:
    """In-app notification entity. Never persisted."""

    id: str
    title: str
    message: str
    type: NotificationType
    timestamp: datetime
    payment_id: Optional[str] = None
    read: bool = False
    persistent: bool = False
