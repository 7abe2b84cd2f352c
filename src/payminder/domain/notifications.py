"""Due-date classification and the in-app notification feed."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable

from payminder.domain.entities import Notification, NotificationType, Payment
from payminder.utils.amount_parser import format_amount
from payminder.utils.date_parser import days_until_due

DEFAULT_DUE_SOON_DAYS = 3
DEFAULT_MAX_AGE = timedelta(hours=24)
DEFAULT_MAX_ENTRIES = 100

TITLES = {
    NotificationType.OVERDUE: "Payment Overdue!",
    NotificationType.DUE_SOON: "Payment Due Soon!",
    NotificationType.REMINDER: "Payment Reminder",
    NotificationType.PAYMENT_ADDED: "New Payment Added",
}


@dataclass(frozen=True)
class Classification:
    """Where a payment stands relative to its due date."""

    type: NotificationType
    days_until_due: int


def _days(count: int) -> str:
    return f"{count} day{'s' if count != 1 else ''}"


def describe_due(days: int) -> str:
    """Phrase a days-until-due value: "is overdue by 2 days", "is due today"..."""
    if days < 0:
        return f"is overdue by {_days(abs(days))}"
    if days == 0:
        return "is due today"
    return f"is due in {_days(days)}"


def classify(payment: Payment, now: datetime, due_soon_days: int = DEFAULT_DUE_SOON_DAYS) -> Classification:
    """Classify an active payment by how many days remain until it is due."""
    days = days_until_due(payment.due_date, now)
    if days < 0:
        kind = NotificationType.OVERDUE
    elif days <= due_soon_days:
        kind = NotificationType.DUE_SOON
    else:
        kind = NotificationType.REMINDER
    return Classification(type=kind, days_until_due=days)


def _stamp(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def payment_notification(
    payment: Payment, now: datetime, due_soon_days: int = DEFAULT_DUE_SOON_DAYS
) -> Notification:
    """Build the persistent reminder entry for one active payment."""
    result = classify(payment, now, due_soon_days)
    return Notification(
        id=f"{result.type.value}-{payment.id}-{_stamp(now)}",
        title=TITLES[result.type],
        message=f"{payment.title} {describe_due(result.days_until_due)}",
        type=result.type,
        payment_id=payment.id,
        timestamp=now,
        persistent=True,
    )


def summary_notification(active_count: int, overdue_count: int, now: datetime) -> Notification:
    """Build the per-tick summary entry shown when several payments are unpaid."""
    if overdue_count > 0:
        title = "Overdue Payments!"
        message = (
            f"You have {overdue_count} overdue payment(s) and "
            f"{active_count} total unpaid payments!"
        )
        kind = NotificationType.OVERDUE
    else:
        title = "Payment Reminder"
        message = f"You have {active_count} unpaid payment(s) pending."
        kind = NotificationType.REMINDER
    return Notification(
        id=f"summary-{_stamp(now)}",
        title=title,
        message=message,
        type=kind,
        timestamp=now,
    )


def payment_added_notification(payment: Payment, now: datetime) -> Notification:
    """Build the one-off entry announcing a newly recorded payment."""
    days = days_until_due(payment.due_date, now)
    return Notification(
        id=f"new-{payment.id}-{_stamp(now)}",
        title=TITLES[NotificationType.PAYMENT_ADDED],
        message=f"{payment.title} for {format_amount(payment.amount)} {describe_due(days)}",
        type=NotificationType.PAYMENT_ADDED,
        payment_id=payment.id,
        timestamp=now,
    )


class NotificationFeed:
    """Bounded, newest-first, in-memory notification queue.

    Entries leave the feed through explicit policies only: age (non-persistent
    entries), payment state (entries of paid payments), supersession by a
    newer classification of the same payment, the size bound, or clear().
    Not thread-safe; the scheduler serializes access.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.max_entries = max_entries
        self._entries: list[Notification] = []

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[Notification]:
        """Entries, newest first."""
        return list(self._entries)

    def unread_count(self) -> int:
        return sum(1 for n in self._entries if not n.read)

    def push(self, notification: Notification) -> None:
        """Prepend an entry and enforce the size bound.

        The oldest non-persistent entry is dropped first; persistent entries
        go only when nothing else is left to drop.
        """
        self._entries.insert(0, notification)
        while len(self._entries) > self.max_entries:
            del self._entries[self._eviction_index()]

    def mark_all_read(self) -> None:
        self._entries = [n if n.read else replace(n, read=True) for n in self._entries]

    def clear(self) -> None:
        self._entries = []

    def prune_expired(self, now: datetime, max_age: timedelta = DEFAULT_MAX_AGE) -> int:
        """Drop non-persistent entries older than max_age. Returns removed count."""
        return self._keep(lambda n: n.persistent or now - n.timestamp < max_age)

    def prune_paid(self, paid_ids: Iterable[str]) -> int:
        """Drop entries referring to paid payments. Returns removed count."""
        paid = set(paid_ids)
        return self._keep(lambda n: n.payment_id is None or n.payment_id not in paid)

    def supersede(self, payment_id: str) -> int:
        """Drop persistent entries of a payment about to be reclassified."""
        return self._keep(lambda n: not (n.persistent and n.payment_id == payment_id))

    def _eviction_index(self) -> int:
        for index in range(len(self._entries) - 1, -1, -1):
            if not self._entries[index].persistent:
                return index
        return len(self._entries) - 1

    def _keep(self, predicate) -> int:
        before = len(self._entries)
        self._entries = [n for n in self._entries if predicate(n)]
        return before - len(self._entries)
