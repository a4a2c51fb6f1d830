"""Conversions between wei and ether for display and transfers.

``Web3.to_wei`` truncates toward zero, so a transfer never moves more than
was asked for.  ``Web3.from_wei`` is exact.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from web3 import Web3

Number = Union[int, str, Decimal]


def to_decimal(amount: Union[Number, float]) -> Decimal:
    """Parse a user-supplied amount, going through ``str`` for floats."""
    if isinstance(amount, float):
        amount = str(amount)
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount}")
    return value


def to_smallest_unit(amount: Union[Number, float], unit: str = "ether") -> int:
    """``1.5`` ETH -> ``1500000000000000000`` wei (truncating extra digits)."""
    return int(Web3.to_wei(to_decimal(amount), unit))


def from_smallest_unit(value: int, unit: str = "ether") -> Decimal:
    """``1500000000000000000`` wei -> ``Decimal("1.5")``."""
    return Decimal(Web3.from_wei(int(value), unit))


def format_amount(amount: Decimal) -> str:
    """Render without exponent or trailing zeros (``1.500`` -> ``1.5``)."""
    if amount == 0:
        return "0"
    return f"{amount.normalize():f}"
