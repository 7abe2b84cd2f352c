"""Utility functions for payminder."""

from payminder.utils.date_parser import parse_date, days_until_due
from payminder.utils.amount_parser import parse_amount, format_amount

__all__ = ["parse_date", "days_until_due", "parse_amount", "format_amount"]
