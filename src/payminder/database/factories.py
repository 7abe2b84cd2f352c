"""Store factory functions for creating store instances."""

from pathlib import Path

from payminder.database.sqlalchemy_db import SQLAlchemyStore


def create_sqlite_store(database_path: str | Path) -> SQLAlchemyStore:
    """Create a SQLite-backed key-value store at database_path.

    Missing parent directories are created.
    """
    path = Path(database_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyStore(f"sqlite:///{path}")
