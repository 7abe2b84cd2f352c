"""Tests for due date parsing and day arithmetic."""

import pytest
from datetime import date, datetime, timedelta

from payminder.utils.date_parser import days_until_due, parse_date, start_of_day

TODAY = date(2024, 12, 20)  # a Friday


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()
    assert parse_date(" Today ", today=TODAY) == TODAY


def test_parse_yesterday_and_tomorrow():
    assert parse_date("yesterday", today=TODAY) == date(2024, 12, 19)
    assert parse_date("tomorrow", today=TODAY) == date(2024, 12, 21)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("in 10 days", date(2024, 12, 30)),
        ("in 1 day", date(2024, 12, 21)),
        ("in 2 weeks", date(2025, 1, 3)),
        ("in 1 month", date(2025, 1, 20)),
    ],
)
def test_parse_in_n_units(text, expected):
    assert parse_date(text, today=TODAY) == expected


def test_parse_next_periods():
    """Test parsing 'next week', 'next month' and 'next year'."""
    # Monday of next week
    assert parse_date("next week", today=TODAY) == date(2024, 12, 23)
    assert parse_date("next month", today=TODAY) == date(2025, 1, 1)
    assert parse_date("next year", today=TODAY) == date(2025, 1, 1)


def test_parse_next_weekday():
    assert parse_date("next monday", today=TODAY) == date(2024, 12, 23)
    # Same weekday means a week ahead
    assert parse_date("next friday", today=TODAY) == date(2024, 12, 27)


@pytest.mark.parametrize("text", ["", "   ", "not a date", "next fortnight"])
def test_parse_invalid(text):
    with pytest.raises(ValueError):
        parse_date(text, today=TODAY)


def test_start_of_day():
    assert start_of_day(datetime(2024, 12, 20, 18, 45, 12)) == datetime(2024, 12, 20)
    assert start_of_day(date(2024, 12, 20)) == datetime(2024, 12, 20)


@pytest.mark.parametrize(
    "due,expected",
    [
        (date(2024, 12, 15), -5),
        (date(2024, 12, 19), -1),
        (date(2024, 12, 20), 0),
        (date(2024, 12, 21), 1),
        (date(2025, 1, 1), 12),
    ],
)
def test_days_until_due_ignores_time_of_day(due, expected):
    assert days_until_due(due, datetime(2024, 12, 20, 0, 0)) == expected
    assert days_until_due(due, datetime(2024, 12, 20, 23, 59)) == expected


def test_days_until_due_accepts_dates():
    assert days_until_due(date(2024, 12, 25), TODAY) == 5


def test_today_relative_to_real_clock():
    assert parse_date("tomorrow") == date.today() + timedelta(days=1)
