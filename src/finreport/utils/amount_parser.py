"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Optional


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "1234.56"
    - "1.234.567,89" (thousands dots, decimal comma)
    - "1,234,567.89" (thousands commas, decimal point)
    - "1234,56" (decimal comma only)
    - "-123,45" and "(123,45)" (negative)
    - "₺1.234,50" (currency symbols are ignored)

    When both separators appear, the last one is the decimal separator. A
    lone comma is a decimal comma; repeated dots are thousands separators.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and inner whitespace
    amount_str = re.sub(r"[$€£¥₺\s]", "", amount_str)
    amount_str = re.sub(r"(?i)tl$", "", amount_str)

    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        if amount_str.count(",") > 1:
            amount_str = amount_str.replace(",", "")
        else:
            amount_str = amount_str.replace(",", ".")
    elif amount_str.count(".") > 1:
        amount_str = amount_str.replace(".", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_balance_amount(amount_str: Optional[str]) -> Decimal:
    """Parse a trial balance cell; blank cells and "-" mean zero."""
    if amount_str is None or not amount_str.strip() or amount_str.strip() == "-":
        return Decimal("0")
    return parse_amount(amount_str)
