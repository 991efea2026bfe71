"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

# Currency markers seen on statements and forms
_CURRENCY = re.compile(r"^(rm|myr|usd|sgd)\s*|\s*(rm|myr|usd|sgd)$|[$€£¥]", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "123.45", "RM 1,234.50", "MYR 80", "$12", "-12.00" and the
    accounting form "(12.00)" for negatives.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]

    text = _CURRENCY.sub("", text.strip()).replace(",", "").replace(" ", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if negative else amount
