"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser

_RELATIVE_DAYS = {"today": 0, "yesterday": -1, "tomorrow": 1}


def parse_date(date_str: str, dayfirst: bool = False) -> date:
    """Parse a date string into a date object.

    Accepts ISO dates ("2025-02-15"), free-form dates handled by dateutil
    ("15 Feb 2025", "Feb 15, 2025"), bank-statement dates ("15/02/2025" with
    ``dayfirst=True``) and the words today, yesterday and tomorrow.

    Args:
        date_str: Date string
        dayfirst: Read ambiguous numeric dates as day/month/year

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    if not text:
        raise ValueError("Empty date string")

    if text in _RELATIVE_DAYS:
        return date.today() + timedelta(days=_RELATIVE_DAYS[text])

    try:
        return date_parser.parse(text, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_optional_date(date_str: Optional[str], dayfirst: bool = False) -> Optional[date]:
    """Parse a date, returning None for a missing or blank value."""
    if date_str is None or not date_str.strip():
        return None
    return parse_date(date_str, dayfirst=dayfirst)
