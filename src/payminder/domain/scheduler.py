"""Payment reminder scheduler.

APScheduler-based scheduler that classifies every active payment by its due
date, fills the in-app notification feed and raises native notifications.

Example:
    >>> scheduler = NotificationScheduler(ledger, permission, notifier)
    >>> scheduler.start()
    >>>
    >>> # Reminders run immediately, then every 5 minutes
    >>> scheduler.notifications()
    >>>
    >>> # Tear down the periodic job and pending dismiss timers
    >>> scheduler.stop()
"""

import threading
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from apscheduler.jobstores.base import JobLookupError  # type: ignore[import-untyped]
from apscheduler.schedulers.background import BackgroundScheduler  # type: ignore[import-untyped]
from apscheduler.triggers.date import DateTrigger  # type: ignore[import-untyped]
from apscheduler.triggers.interval import IntervalTrigger  # type: ignore[import-untyped]

from payminder.domain.entities import Notification
from payminder.domain.ledger import LedgerEvent, LedgerEventKind, PaymentLedger
from payminder.domain.notifications import (
    DEFAULT_DUE_SOON_DAYS,
    DEFAULT_MAX_AGE,
    DEFAULT_MAX_ENTRIES,
    NotificationFeed,
    payment_added_notification,
    payment_notification,
    summary_notification,
)
from payminder.domain.notifier import NativeNotifier, NotificationHandle
from payminder.domain.permissions import NotificationPermission, PermissionState
from payminder.utils.amount_parser import format_amount
from payminder.utils.logging import get_logger

logger = get_logger(__name__)

REMINDER_JOB_ID = "payment_reminders"
DEFAULT_INTERVAL = timedelta(minutes=5)
DEFAULT_AUTO_DISMISS = timedelta(seconds=10)


class NotificationScheduler:
    """Due-date reminder scheduler and owner of the notification feed.

    Reminders run while the scheduler is started, native permission is
    granted and at least one active payment exists. Every tick first drops
    notifications of paid payments, then expired non-persistent ones, then
    reclassifies the active payments. Feed access, ticks and ledger-change
    handling share one lock, so they never interleave.
    """

    def __init__(
        self,
        ledger: PaymentLedger,
        permission: NotificationPermission,
        notifier: Optional[NativeNotifier] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        scheduler: Optional[BackgroundScheduler] = None,
        interval: timedelta = DEFAULT_INTERVAL,
        due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
        max_age: timedelta = DEFAULT_MAX_AGE,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        auto_dismiss: timedelta = DEFAULT_AUTO_DISMISS,
    ):
        """Initialize the reminder scheduler.

        Args:
            ledger: Payment ledger to watch
            permission: Native notification permission capability
            notifier: Native notifier; None delivers in-app notifications only
            clock: Returns the current local time (defaults to datetime.now)
            scheduler: APScheduler instance to use; one is created (and shut down
                on stop) when omitted
            interval: Time between reminder ticks
            due_soon_days: Days ahead (inclusive) classified as due soon
            max_age: Age after which non-persistent notifications are pruned
            max_entries: Feed size bound
            auto_dismiss: Delay before native notifications are closed
        """
        self.ledger = ledger
        self.permission = permission
        self.notifier = notifier
        self.feed = NotificationFeed(max_entries=max_entries)
        self.interval = interval
        self.due_soon_days = due_soon_days
        self.max_age = max_age
        self.auto_dismiss = auto_dismiss

        self._clock = clock or datetime.now
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or BackgroundScheduler()
        self._lock = threading.RLock()
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._dismiss_jobs: set[str] = set()
        self._tick_snapshot: Optional[tuple] = None

        # State tracking
        self.started = False
        self.reminders_running = False
        self.last_tick_time: Optional[datetime] = None

    @classmethod
    def from_settings(cls, ledger, permission, notifier, settings, **kwargs) -> "NotificationScheduler":
        """Build a scheduler from application Settings."""
        return cls(
            ledger,
            permission,
            notifier,
            interval=settings.reminder_interval,
            due_soon_days=settings.due_soon_days,
            max_age=settings.feed_max_age,
            max_entries=settings.feed_max_entries,
            auto_dismiss=settings.auto_dismiss,
            **kwargs,
        )

    # Lifecycle
    def start(self) -> None:
        """Start watching the ledger and, when allowed, the periodic reminders.

        Overdue payments are announced in the feed right away even when native
        notifications are not permitted.
        """
        if self.started:
            logger.warning("reminder_scheduler_already_started")
            return

        self._unsubscribe = self.listen()
        self.started = True

        with self._lock:
            now = self._clock()
            for payment in self.ledger.overdue_payments(now.date()):
                self.feed.supersede(payment.id)
                self.feed.push(payment_notification(payment, now, self.due_soon_days))

        logger.info("reminder_scheduler_started", interval_seconds=self.interval.total_seconds())
        self._sync_reminders()

    def stop(self) -> None:
        """Stop reminders and cancel the periodic job and pending dismiss timers."""
        if not self.started:
            return

        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
            self._stop_reminders()
            for job_id in list(self._dismiss_jobs):
                self._remove_job(job_id)
            self._dismiss_jobs.clear()
            self.started = False

        if self._owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=True)

        logger.info("reminder_scheduler_stopped")

    def listen(self) -> Callable[[], None]:
        """Follow ledger changes without running periodic reminders.

        Added payments are announced and paid ones pruned from the feed.

        Returns:
            Callable that stops listening
        """
        return self.ledger.subscribe(self._on_ledger_change)

    def request_permission(self) -> PermissionState:
        """Ask for native notification permission.

        A first grant is confirmed with a one-time native notification.
        """
        before = self.permission.state()
        state = self.permission.request()
        if state is PermissionState.GRANTED and before is not PermissionState.GRANTED:
            self._dispatch(
                "Notifications Enabled", "You will now receive payment reminders", "permission"
            )
        logger.info("notification_permission_requested", state=state.value)
        self._sync_reminders()
        return state

    # Reminder cycle
    def tick(self) -> list[Notification]:
        """Run one reminder cycle.

        Returns:
            Notifications added to the feed by this tick
        """
        with self._lock:
            now = self._clock()
            self.last_tick_time = now

            paid_pruned = self.feed.prune_paid(self._paid_ids())
            expired = self.feed.prune_expired(now, self.max_age)

            active = self.ledger.active_payments()
            overdue_count = len(self.ledger.overdue_payments(now.date()))
            self._tick_snapshot = self._snapshot(now)

            added = []
            for payment in active:
                notification = payment_notification(payment, now, self.due_soon_days)
                self.feed.supersede(payment.id)
                self.feed.push(notification)
                added.append(notification)
                self._dispatch(notification.title, notification.message, f"payment-{payment.id}")

            if len(active) > 1:
                summary = summary_notification(len(active), overdue_count, now)
                self.feed.push(summary)
                added.append(summary)
                self._dispatch(summary.title, summary.message, "general-reminder")

            logger.info(
                "reminder_tick",
                active=len(active),
                overdue=overdue_count,
                added=len(added),
                paid_pruned=paid_pruned,
                expired=expired,
            )
            return added

    def _scheduled_tick(self) -> None:
        """Job body for the periodic trigger."""
        try:
            with self._lock:
                self._sync_reminders(run_now=False)
                if not self.reminders_running:
                    return
                self.tick()
        except Exception as e:
            logger.error("reminder_tick_failed", error=str(e), exc_info=True)

    def _sync_reminders(self, run_now: bool = True) -> None:
        """Start or stop the periodic job to match the activation conditions."""
        with self._lock:
            should_run = (
                self.started
                and self.permission.state() is PermissionState.GRANTED
                and len(self.ledger.active_payments()) > 0
            )
            if should_run and not self.reminders_running:
                if not self.scheduler.running:
                    self.scheduler.start()
                self._schedule_reminders()
                self.reminders_running = True
                logger.info("reminders_activated")
                if run_now:
                    self.tick()
            elif not should_run and self.reminders_running:
                self._stop_reminders()

    def _schedule_reminders(self) -> None:
        """Add the periodic job, restarting its interval if it exists."""
        seconds = max(1, int(self.interval.total_seconds()))
        self.scheduler.add_job(
            func=self._scheduled_tick,
            trigger=IntervalTrigger(seconds=seconds),
            id=REMINDER_JOB_ID,
            name="Payment reminders",
            replace_existing=True,
            coalesce=True,
        )

    def _stop_reminders(self) -> None:
        if self.reminders_running:
            self._remove_job(REMINDER_JOB_ID)
            self.reminders_running = False
            logger.info("reminders_deactivated")

    # Ledger reactions
    def _on_ledger_change(self, event: LedgerEvent) -> None:
        with self._lock:
            pruned = self.feed.prune_paid(self._paid_ids())
            if pruned:
                logger.debug("paid_notifications_pruned", count=pruned, payment_id=event.payment.id)

            if event.kind is LedgerEventKind.ADDED:
                payment = event.payment
                self.feed.push(payment_added_notification(payment, self._clock()))
                self._dispatch(
                    "Payment Added",
                    f"Added: {payment.title} ({format_amount(payment.amount)})",
                    f"payment-{payment.id}",
                )

            was_running = self.reminders_running
            self._sync_reminders()
            # A fresh activation has just ticked; a running one reclassifies
            # when what it last saw is out of date.
            if (
                was_running
                and self.reminders_running
                and self._snapshot(self._clock()) != self._tick_snapshot
            ):
                self._schedule_reminders()
                self.tick()

    def _paid_ids(self) -> set[str]:
        return {p.id for p in self.ledger.list_payments() if p.is_paid}

    def _snapshot(self, now: datetime) -> tuple:
        """Active payments with their classification inputs, plus overdue ids."""
        active = frozenset(
            (p.id, p.title, p.due_date, p.amount) for p in self.ledger.active_payments()
        )
        overdue = frozenset(p.id for p in self.ledger.overdue_payments(now.date()))
        return active, overdue

    # Native delivery
    def _dispatch(self, title: str, body: str, tag: Optional[str] = None) -> bool:
        """Show a native notification if possible. Never raises."""
        if self.notifier is None:
            return False
        try:
            if self.permission.state() is not PermissionState.GRANTED:
                return False
            handle = self.notifier.show(title, body, tag)
        except Exception as e:
            logger.warning("native_notification_failed", title=title, error=str(e))
            return False
        self._schedule_dismiss(handle)
        return True

    def _schedule_dismiss(self, handle: NotificationHandle) -> None:
        if self.auto_dismiss <= timedelta(0) or not self.scheduler.running:
            return
        job_id = f"dismiss-{uuid.uuid4().hex}"
        self.scheduler.add_job(
            func=self._dismiss,
            trigger=DateTrigger(run_date=datetime.now() + self.auto_dismiss),
            args=[handle, job_id],
            id=job_id,
        )
        self._dismiss_jobs.add(job_id)

    def _dismiss(self, handle: NotificationHandle, job_id: str) -> None:
        with self._lock:
            self._dismiss_jobs.discard(job_id)
        try:
            handle.close()
        except Exception as e:
            logger.warning("native_notification_close_failed", error=str(e))

    def _remove_job(self, job_id: str) -> None:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            pass

    # Feed controls
    def notifications(self) -> list[Notification]:
        """Feed entries, newest first."""
        with self._lock:
            return self.feed.entries()

    def unread_count(self) -> int:
        with self._lock:
            return self.feed.unread_count()

    def open_feed(self) -> list[Notification]:
        """Return the feed as it was before opening, then mark every entry read."""
        with self._lock:
            entries = self.feed.entries()
            self.feed.mark_all_read()
            return entries

    def mark_all_read(self) -> None:
        with self._lock:
            self.feed.mark_all_read()

    def clear_all(self) -> None:
        with self._lock:
            self.feed.clear()

    def get_status(self) -> dict[str, Any]:
        """Scheduler status for display."""
        with self._lock:
            next_run = None
            if self.reminders_running:
                job = self.scheduler.get_job(REMINDER_JOB_ID)
                next_run = job.next_run_time if job is not None else None
            return {
                "started": self.started,
                "reminders_running": self.reminders_running,
                "permission": self.permission.state().value,
                "interval_seconds": self.interval.total_seconds(),
                "last_tick_time": self.last_tick_time,
                "next_run_time": next_run,
                "notifications": len(self.feed),
                "unread": self.feed.unread_count(),
                "pending_dismissals": len(self._dismiss_jobs),
            }
