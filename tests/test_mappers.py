"""Tests for mapper functions between domain entities and stored JSON."""

import json
from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from payminder.database.mappers import (
    RecordDecodeError,
    dump_payments,
    dump_user,
    load_payments,
    load_user,
    payment_from_record,
    payment_to_record,
    user_to_record,
)
from payminder.domain.entities import Payment, User


def _payment(**overrides):
    fields = dict(
        id="abc",
        title="Rent",
        description="January",
        due_date=date(2025, 1, 1),
        amount=Decimal("1200.125"),
        is_paid=False,
        is_archived=True,
        created_at=datetime(2024, 12, 20, 8, 30, tzinfo=UTC),
    )
    fields.update(overrides)
    return Payment(**fields)


class TestUserMapping:
    """Tests for User mapping."""

    def test_user_without_address_omits_key(self):
        record = user_to_record(User(id="1", name="neha", email="me@example.com"))
        assert record == {"id": "1", "name": "neha", "email": "me@example.com"}

    def test_user_round_trip(self):
        user = User(id="1", name="Ada", email="ada@example.com", address="12 Analytical St")
        assert load_user(dump_user(user)) == user

    @pytest.mark.parametrize("raw", ["{broken", "[]", "null", '{"name": "x"}'])
    def test_invalid_user(self, raw):
        with pytest.raises(RecordDecodeError):
            load_user(raw)


class TestPaymentMapping:
    """Tests for Payment mapping."""

    def test_record_shape(self):
        record = payment_to_record(_payment())
        assert record == {
            "id": "abc",
            "title": "Rent",
            "description": "January",
            "dueDate": "2025-01-01",
            "amount": "1200.125",
            "isPaid": False,
            "isArchived": True,
            "createdAt": "2024-12-20T08:30:00+00:00",
        }

    def test_list_keeps_order(self):
        payments = [_payment(id="b"), _payment(id="a")]
        assert [p.id for p in load_payments(dump_payments(payments))] == ["b", "a"]

    def test_accepts_numeric_amount_and_datetime_due_date(self):
        payment = payment_from_record(
            {
                "id": 7,
                "title": "Water",
                "dueDate": "2024-12-30T00:00:00.000Z",
                "amount": 42.5,
                "createdAt": "2024-12-01T10:00:00+00:00",
            }
        )
        assert payment.id == "7"
        assert payment.due_date == date(2024, 12, 30)
        assert payment.amount == Decimal("42.5")
        assert payment.description == ""
        assert payment.is_paid is False

    @pytest.mark.parametrize(
        "raw",
        [
            "{broken",
            "{}",
            "[1, 2]",
            json.dumps([{"id": "1", "title": "x", "dueDate": "soon", "amount": "1", "createdAt": "2024-12-01"}]),
            json.dumps([{"id": "1", "title": "x", "dueDate": "2024-12-01", "amount": "lots", "createdAt": "2024-12-01"}]),
        ],
    )
    def test_invalid_payments(self, raw):
        with pytest.raises(RecordDecodeError):
            load_payments(raw)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"amount": -5},
            {"amount": "-0.01"},
            {"amount": "NaN"},
            {"amount": "Infinity"},
            {"amount": True},
            {"amount": None},
            {"isPaid": "false"},
            {"isArchived": 1},
            {"title": None},
            {"title": "   "},
        ],
    )
    def test_rejects_records_breaking_invariants(self, overrides):
        record = payment_to_record(_payment())
        record.update(overrides)
        with pytest.raises(RecordDecodeError):
            payment_from_record(record)

    def test_missing_flags_default_to_false(self):
        record = payment_to_record(_payment())
        del record["isPaid"]
        del record["isArchived"]
        payment = payment_from_record(record)
        assert payment.is_paid is False
        assert payment.is_archived is False
