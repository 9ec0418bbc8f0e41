"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
THOUSANDTH = Decimal("0.001")


def parse_amount(amount: Number) -> Decimal:
    """Parse an amount into a Decimal.

    Accepts Decimals, ints, floats (converted through ``str`` so 85.5 stays
    85.5) and strings in various formats:
    - "123.45"
    - "R$ 123.45"
    - "$1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount: Amount value or string

    Returns:
        Decimal amount

    Raises:
        ValueError: If the amount cannot be parsed
    """
    if isinstance(amount, bool):
        raise ValueError(f"Could not parse amount '{amount}'")
    if isinstance(amount, (Decimal, int, float)):
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        if not value.is_finite():
            raise ValueError(f"Could not parse amount '{amount}'")
        return value

    if not amount or not amount.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"R\$|[$€£¥]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    try:
        value = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount}': {e}")
    if not value.is_finite():
        raise ValueError(f"Could not parse amount '{amount}'")
    return -value if is_negative else value


def money_round(value: Decimal) -> Decimal:
    """Round a money value to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def quantity_round(value: Decimal) -> Decimal:
    """Round a quantity to thousandths, half up."""
    return value.quantize(THOUSANDTH, rounding=ROUND_HALF_UP)
