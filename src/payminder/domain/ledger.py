"""Payment ledger domain service."""

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Optional

from payminder.database.base import KeyValueStore
from payminder.database.mappers import RecordDecodeError, dump_payments, load_payments
from payminder.domain.entities import Payment, PaymentState
from payminder.domain.errors import (
    NotFoundError,
    ValidationError,
    negative_amount,
    payment_not_found,
    required_field,
    unknown_payment_fields,
)
from payminder.utils.logging import get_logger

logger = get_logger(__name__)

PAYMENTS_KEY = "payments"

UPDATABLE_FIELDS = frozenset(
    {"title", "description", "due_date", "amount", "is_paid", "is_archived"}
)

# (id, title, description, due date, amount, paid)
EXAMPLE_PAYMENTS = [
    ("1", "Electricity Bill", "Monthly electricity payment", date(2024, 12, 25), Decimal("150"), False),
    ("2", "Internet Bill", "Monthly internet subscription", date(2024, 12, 20), Decimal("50"), False),
    ("3", "Credit Card Payment", "Monthly credit card payment", date(2024, 12, 15), Decimal("200"), True),
]


class LedgerEventKind(str, Enum):
    """Kind of change applied to the ledger."""

    ADDED = "added"
    UPDATED = "updated"
    PAID = "paid"
    ARCHIVED = "archived"
    DELETED = "deleted"


@dataclass(frozen=True)
class LedgerEvent:
    """A committed ledger change. ``payment`` is the record after the change
    (or the removed record for deletions)."""

    kind: LedgerEventKind
    payment: Payment


LedgerListener = Callable[[LedgerEvent], None]


class PaymentLedger:
    """Service owning the list of payments.

    The list is persisted in full after every mutation. Mutations of unknown
    ids are silent no-ops unless the ledger is strict.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Callable[[], datetime]] = None,
        strict: bool = False,
    ):
        """Initialize the ledger and load persisted payments.

        Args:
            store: Key-value store instance
            clock: Returns the current local time (defaults to datetime.now)
            strict: Raise NotFoundError for unknown ids instead of ignoring them
        """
        self.store = store
        self.strict = strict
        self._clock = clock or datetime.now
        self._listeners: list[LedgerListener] = []
        self._payments: list[Payment] = self._load()

    # Change subscription
    def subscribe(self, listener: LedgerListener) -> Callable[[], None]:
        """Register a listener called after each committed change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Mutations
    def add_payment(
        self,
        title: str,
        due_date: Optional[date],
        amount: Decimal | int | str = Decimal("0"),
        description: str = "",
    ) -> Payment:
        """Record a new unpaid payment.

        Args:
            title: Payment title (required)
            due_date: Calendar due date (required)
            amount: Non-negative amount
            description: Optional free text

        Returns:
            The created payment

        Raises:
            ValidationError: If title or due date is missing, or amount is negative
        """
        fields = _validate_fields(
            {"title": title, "due_date": due_date, "amount": amount, "description": description}
        )
        payment = Payment(
            id=uuid.uuid4().hex,
            title=fields["title"],
            description=fields["description"],
            due_date=fields["due_date"],
            amount=fields["amount"],
            is_paid=False,
            is_archived=False,
            created_at=self._clock().astimezone(UTC),
        )
        self._commit([*self._payments, payment])
        logger.info(
            "payment_added",
            payment_id=payment.id,
            due_date=payment.due_date.isoformat(),
            amount=str(payment.amount),
        )
        self._emit(LedgerEvent(LedgerEventKind.ADDED, payment))
        return payment

    def update_payment(self, payment_id: str, **changes: Any) -> Optional[Payment]:
        """Merge field changes into a payment.

        Only title, description, due_date, amount, is_paid and is_archived
        may be changed.

        Returns:
            The updated payment, or None if the id is unknown

        Raises:
            ValidationError: If a field is not updatable or a value is invalid
            NotFoundError: If the id is unknown and the ledger is strict
        """
        unknown = [name for name in changes if name not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(unknown_payment_fields(unknown))
        fields = _validate_fields(changes)
        return self._replace(payment_id, LedgerEventKind.UPDATED, **fields)

    def mark_as_paid(self, payment_id: str) -> Optional[Payment]:
        """Mark a payment paid. Applying it twice has no further effect."""
        return self._replace(payment_id, LedgerEventKind.PAID, is_paid=True)

    def archive_payment(self, payment_id: str) -> Optional[Payment]:
        """Archive a payment from any state."""
        return self._replace(payment_id, LedgerEventKind.ARCHIVED, is_archived=True)

    def delete_payment(self, payment_id: str) -> Optional[Payment]:
        """Remove a payment permanently.

        Returns:
            The removed payment, or None if the id is unknown
        """
        payment = self._find(payment_id)
        if payment is None:
            return None
        self._commit([p for p in self._payments if p.id != payment_id])
        logger.info("payment_deleted", payment_id=payment_id)
        self._emit(LedgerEvent(LedgerEventKind.DELETED, payment))
        return payment

    # Reads
    def get_payment(self, payment_id: str) -> Optional[Payment]:
        """Get payment by ID."""
        for payment in self._payments:
            if payment.id == payment_id:
                return payment
        return None

    def list_payments(self) -> list[Payment]:
        """All payments in insertion order."""
        return list(self._payments)

    def active_payments(self) -> list[Payment]:
        return [p for p in self._payments if p.state is PaymentState.ACTIVE]

    def paid_payments(self) -> list[Payment]:
        return [p for p in self._payments if p.state is PaymentState.PAID]

    def archived_payments(self) -> list[Payment]:
        return [p for p in self._payments if p.state is PaymentState.ARCHIVED]

    def overdue_payments(self, today: Optional[date] = None) -> list[Payment]:
        """Active payments whose due date is strictly before today."""
        today = today or self.today()
        return [p for p in self.active_payments() if p.due_date < today]

    def upcoming_payments(self, today: Optional[date] = None) -> list[Payment]:
        """Active payments due today or later."""
        today = today or self.today()
        return [p for p in self.active_payments() if p.due_date >= today]

    def total_due(self) -> Decimal:
        """Sum of active payment amounts."""
        return sum((p.amount for p in self.active_payments()), Decimal("0"))

    def total_paid(self) -> Decimal:
        """Sum of paid, unarchived payment amounts."""
        return sum((p.amount for p in self.paid_payments()), Decimal("0"))

    def today(self) -> date:
        return self._clock().date()

    # Internals
    def _find(self, payment_id: str) -> Optional[Payment]:
        payment = self.get_payment(payment_id)
        if payment is None and self.strict:
            raise NotFoundError(payment_not_found(payment_id))
        return payment

    def _replace(self, payment_id: str, kind: LedgerEventKind, **fields: Any) -> Optional[Payment]:
        current = self._find(payment_id)
        if current is None:
            logger.debug("payment_mutation_ignored", payment_id=payment_id, kind=kind.value)
            return None
        updated = replace(current, **fields)
        self._commit([updated if p.id == payment_id else p for p in self._payments])
        logger.info(f"payment_{kind.value}", payment_id=payment_id)
        self._emit(LedgerEvent(kind, updated))
        return updated

    def _commit(self, payments: list[Payment]) -> None:
        # Swap in a new list so readers on other threads see whole snapshots.
        self._payments = payments
        self.store.set(PAYMENTS_KEY, dump_payments(payments))

    def _emit(self, event: LedgerEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _load(self) -> list[Payment]:
        raw = self.store.get(PAYMENTS_KEY)
        if raw is not None:
            try:
                return load_payments(raw)
            except RecordDecodeError as e:
                logger.warning("payments_restore_failed", error=str(e))
        payments = self._example_payments()
        self.store.set(PAYMENTS_KEY, dump_payments(payments))
        logger.info("payments_seeded", count=len(payments))
        return payments

    def _example_payments(self) -> list[Payment]:
        created_at = self._clock().astimezone(UTC)
        return [
            Payment(
                id=payment_id,
                title=title,
                description=description,
                due_date=due_date,
                amount=amount,
                is_paid=is_paid,
                is_archived=False,
                created_at=created_at,
            )
            for payment_id, title, description, due_date, amount, is_paid in EXAMPLE_PAYMENTS
        ]


def _validate_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalize payment field values that are present."""
    cleaned = dict(fields)
    if "title" in cleaned:
        title = cleaned["title"]
        if title is None or not str(title).strip():
            raise ValidationError(required_field("Title"))
        cleaned["title"] = str(title).strip()
    if "due_date" in cleaned:
        due_date = cleaned["due_date"]
        if due_date is None or due_date == "":
            raise ValidationError(required_field("Due date"))
        if isinstance(due_date, datetime):
            cleaned["due_date"] = due_date.date()
        elif not isinstance(due_date, date):
            raise ValidationError(f"Due date must be a date (got {due_date!r})")
    if "amount" in cleaned:
        try:
            amount = Decimal(str(cleaned["amount"]))
        except InvalidOperation:
            raise ValidationError(f"Invalid amount: {cleaned['amount']!r}")
        if not amount.is_finite():
            raise ValidationError(f"Invalid amount: {cleaned['amount']!r}")
        if amount < 0:
            raise ValidationError(negative_amount(amount))
        cleaned["amount"] = amount
    if "description" in cleaned:
        cleaned["description"] = str(cleaned["description"] or "")
    for flag in ("is_paid", "is_archived"):
        if flag in cleaned:
            cleaned[flag] = bool(cleaned[flag])
    return cleaned
