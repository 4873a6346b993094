"""
Currency Support Module

ISO 4217 currency codes and Decimal helpers for monetary values. Amounts are
kept as Decimal internally and only turned into JSON numbers at the wire.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from enum import Enum
from typing import Any, Union

# Set global decimal context for financial precision
getcontext().prec = 28


class Currency(Enum):
    """ISO 4217 Currency Codes with precision info"""
    TND = ("TND", 3)  # Tunisian Dinar, 3 decimal places (millimes)

    def __init__(self, code: str, precision: int):
        self.code = code
        self.precision = precision


def to_decimal(value: Any) -> Decimal:
    """
    Convert a wire value to Decimal without going through binary float.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a numeric amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a numeric amount: {value!r}")
    return result


def quantize_amount(value: Decimal, currency: Currency) -> Decimal:
    """Round to the currency's minor unit"""
    return value.quantize(
        Decimal('0.1') ** currency.precision,
        rounding=ROUND_HALF_UP
    )


def to_number(amount: Decimal) -> Union[int, float]:
    """JSON number for a Decimal amount (integral values stay integers)"""
    if amount == amount.to_integral_value() and amount.as_tuple().exponent >= 0:
        return int(amount)
    return float(amount)
