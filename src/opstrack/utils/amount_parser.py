"""Amount parsing utilities.

Amounts are kept as signed integer cents everywhere; this module is the
only place where decimal text is turned into cents.
"""

from decimal import Decimal, InvalidOperation
import re


def parse_amount_in_cents(amount: str | int | float | Decimal) -> int:
    """Parse an amount into signed integer cents.

    Handles various formats:
    - "123.45"
    - "€123.45" / "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - numbers decoded from JSON (12, 12.5)

    Args:
        amount: Amount in currency units

    Returns:
        Amount in cents

    Raises:
        ValueError: If the amount cannot be parsed or has sub-cent precision
    """
    if isinstance(amount, bool):
        raise ValueError(f"Could not parse amount {amount!r}")
    if isinstance(amount, (int, float, Decimal)):
        value = Decimal(str(amount))
    elif isinstance(amount, str):
        value = _parse_amount_text(amount)
    else:
        raise ValueError(f"Could not parse amount {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Could not parse amount {amount!r}")

    cents = value * 100
    if cents != cents.to_integral_value():
        raise ValueError(f"Amount {amount!r} has more than two decimal places")
    return int(cents)


def _parse_amount_text(amount_str: str) -> Decimal:
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols, thousands separators and inner spaces
    amount_str = re.sub(r"[$€£¥,\s]", "", amount_str)

    try:
        value = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None
    return -value if is_negative else value


def format_cents(amount_in_cents: int) -> str:
    """Render cents as a signed decimal string (e.g. -1234 -> '-12.34')."""
    sign = "-" if amount_in_cents < 0 else ""
    units, cents = divmod(abs(amount_in_cents), 100)
    return f"{sign}{units}.{cents:02d}"
