"""Session domain service."""

from typing import Optional

from payminder.database.base import KeyValueStore
from payminder.database.mappers import RecordDecodeError, dump_user, load_user
from payminder.domain.entities import User
from payminder.domain.errors import ValidationError, required_field
from payminder.utils.logging import get_logger

logger = get_logger(__name__)

USER_KEY = "user"
SESSION_USER_ID = "1"
PLACEHOLDER_NAME = "neha"


class SessionService:
    """Service holding the signed-in user.

    Authentication is a mock: any non-empty credentials succeed and the user
    record is fabricated from the supplied fields.
    """

    def __init__(self, store: KeyValueStore):
        """Initialize session service and rehydrate any persisted user.

        Args:
            store: Key-value store instance
        """
        self.store = store
        self._user: Optional[User] = None
        self._restore()

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def login(self, email: str, password: str) -> bool:
        """Sign in with any non-empty email and password.

        Args:
            email: Email address
            password: Password (not verified)

        Returns:
            True once the session is established

        Raises:
            ValidationError: If email or password is empty
        """
        _require(email, "Email")
        _require(password, "Password")
        user = User(id=SESSION_USER_ID, name=PLACEHOLDER_NAME, email=email.strip())
        self._establish(user)
        logger.info("session_login", email=user.email)
        return True

    def signup(self, name: str, email: str, address: Optional[str], password: str) -> bool:
        """Create an account and sign in.

        Args:
            name: Display name
            email: Email address
            address: Optional postal address
            password: Password (not stored)

        Returns:
            True once the session is established

        Raises:
            ValidationError: If name, email or password is empty
        """
        _require(name, "Name")
        _require(email, "Email")
        _require(password, "Password")
        address = address.strip() if address and address.strip() else None
        user = User(id=SESSION_USER_ID, name=name.strip(), email=email.strip(), address=address)
        self._establish(user)
        logger.info("session_signup", email=user.email)
        return True

    def logout(self) -> None:
        """End the session and forget the persisted user."""
        self._user = None
        self.store.remove(USER_KEY)
        logger.info("session_logout")

    def _establish(self, user: User) -> None:
        self._user = user
        self.store.set(USER_KEY, dump_user(user))

    def _restore(self) -> None:
        raw = self.store.get(USER_KEY)
        if raw is None:
            return
        try:
            self._user = load_user(raw)
        except RecordDecodeError as e:
            # Corrupt records leave the session signed out.
            logger.warning("session_restore_failed", error=str(e))
            self._user = None


def _require(value: Optional[str], field_name: str) -> None:
    if value is None or not value.strip():
        raise ValidationError(required_field(field_name))
