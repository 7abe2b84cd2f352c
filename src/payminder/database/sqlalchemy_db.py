"""SQLAlchemy key-value store implementation."""

from typing import Optional
from sqlalchemy.orm import Session

from payminder.database.base import KeyValueStore
from payminder.database.models import KeyValueEntry, create_session_factory
from payminder.utils.logging import get_logger

logger = get_logger(__name__)


class SQLAlchemyStore(KeyValueStore):
    """SQLAlchemy-based implementation of the KeyValueStore interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def get(self, key: str) -> Optional[str]:
        """Get the value stored under key, or None if absent."""
        session = self._get_session()
        entry = session.get(KeyValueEntry, key)
        if entry is None:
            return None
        return entry.value

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        session = self._get_session()
        entry = session.get(KeyValueEntry, key)
        if entry is None:
            session.add(KeyValueEntry(key=key, value=value))
        else:
            entry.value = value
        session.commit()
        logger.debug("store_write", key=key, size=len(value))

    def remove(self, key: str) -> None:
        """Remove key. No-op if absent."""
        session = self._get_session()
        entry = session.get(KeyValueEntry, key)
        if entry is None:
            return
        session.delete(entry)
        session.commit()
        logger.debug("store_remove", key=key)
