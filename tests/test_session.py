"""Tests for the session service."""

import json

import pytest

from payminder.domain.errors import ValidationError
from payminder.domain.session import PLACEHOLDER_NAME, USER_KEY, SessionService


def test_starts_signed_out(session_service):
    assert session_service.is_authenticated is False
    assert session_service.user is None


def test_login_fabricates_user(session_service, temp_store):
    assert session_service.login("me@example.com", "anything") is True
    assert session_service.is_authenticated is True
    assert session_service.user.email == "me@example.com"
    assert session_service.user.name == PLACEHOLDER_NAME
    assert session_service.user.address is None

    stored = json.loads(temp_store.get(USER_KEY))
    assert stored == {"id": "1", "name": PLACEHOLDER_NAME, "email": "me@example.com"}


def test_login_does_not_store_password(session_service, temp_store):
    session_service.login("me@example.com", "hunter2")
    assert "hunter2" not in temp_store.get(USER_KEY)


@pytest.mark.parametrize("email,password", [("", "pw"), ("me@example.com", ""), ("  ", "pw")])
def test_login_requires_credentials(session_service, temp_store, email, password):
    with pytest.raises(ValidationError):
        session_service.login(email, password)
    assert session_service.is_authenticated is False
    assert temp_store.get(USER_KEY) is None


def test_signup(session_service):
    assert session_service.signup("Ada", "ada@example.com", "12 Analytical St", "pw") is True
    user = session_service.user
    assert user.name == "Ada"
    assert user.email == "ada@example.com"
    assert user.address == "12 Analytical St"


def test_signup_blank_address_is_none(session_service):
    session_service.signup("Ada", "ada@example.com", "   ", "pw")
    assert session_service.user.address is None


def test_signup_requires_name(session_service):
    with pytest.raises(ValidationError, match="Name is required"):
        session_service.signup("", "ada@example.com", None, "pw")


def test_logout_clears_persisted_user(session_service, temp_store):
    session_service.login("me@example.com", "pw")
    session_service.logout()
    assert session_service.is_authenticated is False
    assert session_service.user is None
    assert temp_store.get(USER_KEY) is None


def test_rehydrates_on_start(session_service, temp_store):
    session_service.signup("Ada", "ada@example.com", "12 Analytical St", "pw")
    restored = SessionService(temp_store)
    assert restored.is_authenticated is True
    assert restored.user == session_service.user


@pytest.mark.parametrize(
    "raw",
    ["{broken", "[]", '"just a string"', '{"id": "1"}', "null"],
)
def test_corrupt_record_fails_open(temp_store, raw):
    temp_store.set(USER_KEY, raw)
    session = SessionService(temp_store)
    assert session.is_authenticated is False
    assert session.user is None
