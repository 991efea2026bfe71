"""Input checks shared by the CRUD services.

Values may arrive typed (from code) or as strings (from forms, CSV rows
and the CLI); both forms are accepted.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union

from eventledger.domain.entities import CategoryCode, TransactionType
from eventledger.domain.errors import ValidationError, missing_field, negative_amount
from eventledger.utils.amount_parser import parse_amount
from eventledger.utils.date_parser import parse_date


def require_text(value: Any, field_name: str) -> str:
    """Return stripped text, rejecting None and blanks."""
    if value is None or not str(value).strip():
        raise ValidationError(missing_field(field_name))
    return str(value).strip()


def require_amount(value: Any) -> Decimal:
    """Return a non-negative Decimal amount."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(missing_field("amount"))
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = parse_amount(str(value))
        except ValueError as e:
            raise ValidationError(f"Invalid amount: {e}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value}")
    if amount < 0:
        raise ValidationError(negative_amount(amount))
    return amount


def optional_date(value: Union[str, date, None]) -> Optional[date]:
    """Return a date, or None for a missing or blank value."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_date(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid date: {e}")


def require_category(value: Union[str, CategoryCode, None]) -> CategoryCode:
    """Return a CategoryCode, rejecting a missing category."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(missing_field("category"))
    if isinstance(value, CategoryCode):
        return value
    return CategoryCode(value)


def require_type(value: Union[str, TransactionType, None]) -> TransactionType:
    """Return a TransactionType from an enum or its string value."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(missing_field("type"))
    try:
        return TransactionType(value.strip().lower() if isinstance(value, str) else value)
    except ValueError:
        raise ValidationError(f"Invalid transaction type: {value}")
