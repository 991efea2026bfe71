"""Tests for date and amount parsers."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from eventledger.utils.amount_parser import parse_amount
from eventledger.utils.date_parser import parse_date, parse_optional_date


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    result = parse_date("Today")
    assert result == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    result = parse_date("yesterday")
    assert result == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    result = parse_date("tomorrow")
    assert result == date.today() + timedelta(days=1)


def test_parse_free_form_date():
    assert parse_date("15 Feb 2025") == date(2025, 2, 15)


def test_parse_dayfirst():
    """Bank statements write day before month."""
    assert parse_date("03/02/2025", dayfirst=True) == date(2025, 2, 3)
    assert parse_date("03/02/2025") == date(2025, 3, 2)


@pytest.mark.parametrize("value", ["", "   ", "not a date", "2025-13-45"])
def test_parse_invalid_date(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_parse_optional_date():
    assert parse_optional_date(None) is None
    assert parse_optional_date("  ") is None
    assert parse_optional_date("2025-03-01") == date(2025, 3, 1)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("80", Decimal("80")),
        ("123.45", Decimal("123.45")),
        ("RM 1,234.50", Decimal("1234.50")),
        ("MYR80", Decimal("80")),
        ("80 rm", Decimal("80")),
        ("$12", Decimal("12")),
        ("-12.00", Decimal("-12.00")),
        ("(12.00)", Decimal("-12.00")),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", ["", "abc", "1.2.3", "NaN", "Infinity"])
def test_parse_invalid_amount(value):
    with pytest.raises(ValueError):
        parse_amount(value)
