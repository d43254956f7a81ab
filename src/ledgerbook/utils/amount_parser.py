"""Amount parsing utilities."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

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

    # Remove currency symbols and codes
    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = re.sub(r"^(USD|ARS)\s*", "", amount_str.strip(), flags=re.IGNORECASE)

    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


@dataclass(frozen=True)
class MovementSpec:
    """Parsed ``CODE=AMOUNT[@RATE]`` command-line argument."""

    account_code: str
    amount: Decimal
    rate: Optional[Decimal] = None


def parse_movement_spec(spec: str) -> MovementSpec:
    """Parse a movement given as ``CODE=AMOUNT`` or ``CODE=AMOUNT@RATE``.

    Examples:
        "1.1.01=100"         -> account 1.1.01, amount 100
        "1.1.02=150000@1500" -> account 1.1.02, amount 150000 at rate 1500

    Raises:
        ValueError: If the text does not follow the format
    """
    if "=" not in spec:
        raise ValueError(f"Invalid movement '{spec}'. Expected CODE=AMOUNT[@RATE]")

    code, _, rest = spec.partition("=")
    code = code.strip()
    if not code:
        raise ValueError(f"Invalid movement '{spec}': missing account code")

    rate = None
    if "@" in rest:
        rest, _, rate_str = rest.partition("@")
        rate = parse_amount(rate_str)

    return MovementSpec(account_code=code, amount=parse_amount(rest), rate=rate)
