"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_CURRENCY_MARKERS = re.compile(r"(?i)vnd|usd|[$€£¥₫đ]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "150000"
    - "2,500,000"
    - "150000 VND" / "150000₫"
    - "$12.50" / "12.50 USD"

    Commas are thousands separators; a dot is always the decimal point.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string is empty, non-numeric or not finite
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    cleaned = _CURRENCY_MARKERS.sub("", str(amount_str))
    cleaned = cleaned.replace(",", "").replace("_", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}': not a number")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return amount
