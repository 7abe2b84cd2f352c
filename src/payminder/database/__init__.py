"""Storage layer for payminder application."""

from payminder.database.base import KeyValueStore
from payminder.database.factories import create_sqlite_store

__all__ = ["KeyValueStore", "create_sqlite_store"]
