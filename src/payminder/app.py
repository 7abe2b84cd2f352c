"""Application context wiring.

Session, ledger and permission are built once per process from one store and
handed to every consumer, so tests can construct isolated instances.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from payminder.config import Settings
from payminder.database.base import KeyValueStore
from payminder.database.factories import create_sqlite_store
from payminder.domain.ledger import PaymentLedger
from payminder.domain.notifier import NativeNotifier
from payminder.domain.permissions import StoredPermission
from payminder.domain.scheduler import NotificationScheduler
from payminder.domain.session import SessionService


@dataclass
class AppContext:
    """Services shared by the CLI commands."""

    settings: Settings
    store: KeyValueStore
    session: SessionService
    ledger: PaymentLedger
    permission: StoredPermission

    def create_scheduler(
        self,
        notifier: Optional[NativeNotifier] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> NotificationScheduler:
        """Build a reminder scheduler over this context's ledger."""
        return NotificationScheduler.from_settings(
            self.ledger, self.permission, notifier, self.settings, clock=clock
        )

    def close(self) -> None:
        self.store.disconnect()


def build_context(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    permission_prompt: Optional[Callable[[], bool]] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> AppContext:
    """Connect the store and construct the services.

    Args:
        settings: Application settings (read from the environment when omitted)
        store: Key-value store; a SQLite store at settings.database_path when omitted
        permission_prompt: Asks the user for native notification permission
        clock: Returns the current local time (defaults to datetime.now)
    """
    settings = settings or Settings()
    if store is None:
        store = create_sqlite_store(settings.database_path)
    store.connect()
    store.initialize_schema()
    return AppContext(
        settings=settings,
        store=store,
        session=SessionService(store),
        ledger=PaymentLedger(store, clock=clock),
        permission=StoredPermission(store, prompt=permission_prompt),
    )
