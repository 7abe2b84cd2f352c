"""Shared pytest fixtures for payminder tests."""

import os
import tempfile
from datetime import datetime, timedelta

import pytest

from payminder.database.factories import create_sqlite_store
from payminder.domain.ledger import PaymentLedger, PAYMENTS_KEY
from payminder.domain.permissions import PermissionState, StaticPermission
from payminder.domain.session import SessionService


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_store():
    """Create a temporary SQLite key-value store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    # Cleanup
    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Clock fixed at 2024-12-20 09:30 local time."""
    return FixedClock(datetime(2024, 12, 20, 9, 30))


@pytest.fixture
def seeded_ledger(temp_store, clock):
    """Ledger seeded with the three example payments."""
    return PaymentLedger(temp_store, clock=clock)


@pytest.fixture
def ledger(temp_store, clock):
    """Ledger starting with no payments."""
    temp_store.set(PAYMENTS_KEY, "[]")
    return PaymentLedger(temp_store, clock=clock)


@pytest.fixture
def session_service(temp_store):
    """Create a SessionService with a temporary store."""
    return SessionService(temp_store)


@pytest.fixture
def granted_permission():
    return StaticPermission(initial=PermissionState.GRANTED)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def logged_in(cli_runner, temp_store):
    """Log in through the CLI against the temporary store."""
    from payminder.cli.main import cli

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_store.database_path, "login", "me@example.com", "--password", "pw"],
    )
    assert result.exit_code == 0
    return temp_store.database_path
