"""Tests for domain entities."""

from dataclasses import FrozenInstanceError
from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from payminder.domain.entities import Notification, NotificationType, Payment, PaymentState, User


def _payment(**overrides):
    fields = dict(
        id="1",
        title="Electricity Bill",
        description="Monthly electricity payment",
        due_date=date(2024, 12, 25),
        amount=Decimal("150"),
        is_paid=False,
        is_archived=False,
        created_at=datetime(2024, 12, 1, tzinfo=UTC),
    )
    fields.update(overrides)
    return Payment(**fields)


class TestPayment:
    """Tests for Payment entity."""

    @pytest.mark.parametrize(
        "is_paid,is_archived,state",
        [
            (False, False, PaymentState.ACTIVE),
            (True, False, PaymentState.PAID),
            (False, True, PaymentState.ARCHIVED),
            (True, True, PaymentState.ARCHIVED),
        ],
    )
    def test_state(self, is_paid, is_archived, state):
        payment = _payment(is_paid=is_paid, is_archived=is_archived)
        assert payment.state is state
        assert payment.is_active is (state is PaymentState.ACTIVE)

    def test_frozen(self):
        payment = _payment()
        with pytest.raises(FrozenInstanceError):
            payment.is_paid = True


def test_user_address_optional():
    user = User(id="1", name="neha", email="me@example.com")
    assert user.address is None


def test_notification_defaults():
    notification = Notification(
        id="n1",
        title="Payment Reminder",
        message="You have 2 unpaid payment(s) pending.",
        type=NotificationType.REMINDER,
        timestamp=datetime(2024, 12, 20, 9, 30),
    )
    assert notification.read is False
    assert notification.persistent is False
    assert notification.payment_id is None


def test_notification_type_values():
    assert [t.value for t in NotificationType] == ["overdue", "dueSoon", "reminder", "paymentAdded"]
