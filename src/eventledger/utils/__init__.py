"""Utility functions for eventledger."""

from eventledger.utils.date_parser import parse_date, parse_optional_date
from eventledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_optional_date", "parse_amount"]
