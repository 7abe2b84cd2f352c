"""Native (system) notification interface."""

from abc import ABC, abstractmethod
from typing import Optional


class NotificationHandle(ABC):
    """A shown native notification."""

    @abstractmethod
    def close(self) -> None:
        """Dismiss the notification. Closing twice is harmless."""
        pass


class NativeNotifier(ABC):
    """Shows notifications outside the application feed."""

    @abstractmethod
    def show(self, title: str, body: str, tag: Optional[str] = None) -> NotificationHandle:
        """Show a notification.

        Args:
            title: Notification title
            body: Notification text
            tag: Grouping tag; a newer notification with the same tag replaces an older one
        """
        pass
