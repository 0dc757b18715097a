"""Amount parsing utilities."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

# Statement amounts keep only digits, the sign and the decimal point.
_NON_NUMERIC = re.compile(r"[^\d.\-]")

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to whole cents, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-supplied amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()
    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        return Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")


def parse_statement_amount(raw: Optional[str]) -> Optional[Decimal]:
    """Parse an amount cell from a statement, keeping its sign.

    Every character other than digits, '-' and '.' is dropped first, so
    "$1,234.50" and "1 234.50 USD" both read as 1234.50.

    Returns:
        Signed Decimal, or None if nothing numeric remains.
    """
    if raw is None:
        return None
    cleaned = _NON_NUMERIC.sub("", str(raw))
    if not cleaned:
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None
