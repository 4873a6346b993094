"""
Input checks shared by the transfer and posting engines.
"""

from decimal import Decimal
from typing import Any, Optional

from .currency import Currency, quantize_amount, to_decimal
from .exceptions import InvalidAmountError


def is_blank(value: Any) -> bool:
    """True when a required input is absent or empty"""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_amount(value: Any, currency: Currency) -> Optional[Decimal]:
    """
    Parse a requested amount and round it to the currency's minor unit.

    Returns None when the amount counts as absent: zero, or rounding to
    zero. Presence must be checked with is_blank() beforehand.

    Raises:
        InvalidAmountError: If the value is not numeric
    """
    try:
        amount = to_decimal(value)
    except ValueError:
        raise InvalidAmountError(value, reason="Amount must be a number")
    amount = quantize_amount(amount, currency)
    if amount == 0:
        return None
    return amount


def check_amount_policy(amount: Decimal, reject_non_positive: bool) -> None:
    """Reject negative amounts unless the permissive policy is enabled"""
    if reject_non_positive and amount <= 0:
        raise InvalidAmountError(amount)
