"""Notification permission capability."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional

from payminder.database.base import KeyValueStore
from payminder.utils.logging import get_logger

logger = get_logger(__name__)

PERMISSION_KEY = "notificationPermission"


class PermissionState(str, Enum):
    """Native notification permission state."""

    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"


class NotificationPermission(ABC):
    """Capability deciding whether native notifications may be shown."""

    @abstractmethod
    def state(self) -> PermissionState:
        """Current permission state. Queried before every native dispatch."""
        pass

    @abstractmethod
    def request(self) -> PermissionState:
        """Ask for permission. Resolves to GRANTED or DENIED."""
        pass


class StaticPermission(NotificationPermission):
    """Permission held in memory, answering requests with a fixed decision."""

    def __init__(
        self,
        initial: PermissionState = PermissionState.DEFAULT,
        answer: PermissionState = PermissionState.DENIED,
    ):
        self._state = initial
        self._answer = answer

    def state(self) -> PermissionState:
        return self._state

    def request(self) -> PermissionState:
        if self._state is PermissionState.DEFAULT:
            self._state = self._answer
        return self._state

    def set(self, state: PermissionState) -> None:
        self._state = state


class StoredPermission(NotificationPermission):
    """Permission decision remembered in the key-value store.

    While the state is DEFAULT, request() asks the prompt callable (True
    grants). Once decided, requests return the stored decision unchanged.
    """

    def __init__(self, store: KeyValueStore, prompt: Optional[Callable[[], bool]] = None):
        """Initialize stored permission.

        Args:
            store: Key-value store instance
            prompt: Asks the user; returns True to grant. None means requests deny.
        """
        self.store = store
        self.prompt = prompt
        # Cached so dispatch on scheduler threads never touches the store.
        self._state = self._load()

    def state(self) -> PermissionState:
        return self._state

    def request(self) -> PermissionState:
        if self._state is not PermissionState.DEFAULT:
            return self._state
        granted = bool(self.prompt()) if self.prompt is not None else False
        self.set(PermissionState.GRANTED if granted else PermissionState.DENIED)
        return self._state

    def set(self, state: PermissionState) -> None:
        """Record a decision, or forget it with DEFAULT."""
        self._state = state
        if state is PermissionState.DEFAULT:
            self.store.remove(PERMISSION_KEY)
        else:
            self.store.set(PERMISSION_KEY, state.value)
        logger.info("notification_permission_changed", state=state.value)

    def _load(self) -> PermissionState:
        raw = self.store.get(PERMISSION_KEY)
        if raw is None:
            return PermissionState.DEFAULT
        try:
            return PermissionState(raw)
        except ValueError:
            logger.warning("notification_permission_invalid", value=raw)
            return PermissionState.DEFAULT
