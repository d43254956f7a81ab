"""Currency conversion between the secondary and the reporting currency.

Every stored amount, every sum and every balance comparison goes through
``round_amount`` so that the ledger never drifts by a cent between the
place an amount is validated and the place it is reported.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import Iterable, Optional, Union

from ledgerbook.domain.errors import InvalidRate

Number = Union[Decimal, int, str, float]

CENT = Decimal("0.01")
RATE_QUANTUM = Decimal("0.000001")
ZERO = Decimal("0.00")


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_amount(value: Number) -> Decimal:
    """Round a monetary amount to cents using banker's rounding."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def round_rate(value: Number) -> Decimal:
    """Round an exchange rate to the precision it is stored with."""
    return to_decimal(value).quantize(RATE_QUANTUM, rounding=ROUND_HALF_EVEN)


def to_reporting_currency(native_amount: Number, rate: Optional[Number]) -> Decimal:
    """Convert a secondary-currency amount to the reporting currency.

    Args:
        native_amount: Amount in the account's native currency
        rate: Units of native currency per reporting-currency unit

    Returns:
        Reporting-currency amount rounded to cents

    Raises:
        InvalidRate: If the amount is nonzero and the rate is missing or <= 0
    """
    amount = to_decimal(native_amount)
    if amount == 0:
        return ZERO
    if rate is None or to_decimal(rate) <= 0:
        raise InvalidRate(None if rate is None else to_decimal(rate))
    return round_amount(amount / to_decimal(rate))


def from_reporting_currency(amount: Number, rate: Number) -> Decimal:
    """Express a reporting-currency amount in the native currency."""
    if to_decimal(rate) <= 0:
        raise InvalidRate(to_decimal(rate))
    return round_amount(to_decimal(amount) * to_decimal(rate))


def weighted_average_rate(pairs: Iterable[tuple[Decimal, Decimal]]) -> Optional[Decimal]:
    """Average rate of (native_amount, rate) pairs weighted by native amount.

    Returns None when there is nothing to average.
    """
    weighted = Decimal(0)
    weight = Decimal(0)
    for native_amount, rate in pairs:
        weighted += to_decimal(native_amount) * to_decimal(rate)
        weight += to_decimal(native_amount)
    if weight == 0:
        return None
    return (weighted / weight).quantize(RATE_QUANTUM, rounding=ROUND_HALF_EVEN)
