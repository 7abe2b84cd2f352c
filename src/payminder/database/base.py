"""Abstract key-value store interface."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """Abstract string key-value store for payminder.

    Values are opaque strings (serialized JSON). The store performs no
    decoding, so a corrupt value is reported by the caller that reads it.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the underlying storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the underlying storage."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get the value stored under key, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. No-op if absent."""
        pass
