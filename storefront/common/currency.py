"""
Currency Utilities

Formatting and parsing of Tunisian Dinar amounts (3 decimal places).
All arithmetic is done on Decimal to keep cart totals exact.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CURRENCY_CODE = "TND"
CURRENCY_DECIMALS = 3

_QUANTUM = Decimal(1).scaleb(-CURRENCY_DECIMALS)

Number = Union[Decimal, int, float, str, None]


def to_money(amount: Number) -> Decimal:
    """
    Convert an API or user supplied amount to a quantized Decimal.

    Floats go through str() first so 10.1 becomes Decimal("10.100"),
    not its binary expansion. Unparseable or out-of-range input becomes
    zero.
    """
    if amount is None:
        return Decimal("0.000")
    if isinstance(amount, float):
        amount = repr(amount)
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0.000")
    if not value.is_finite():
        return Decimal("0.000")
    try:
        return value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the decimal context holds
        return Decimal("0.000")


def format_amount(amount: Number) -> str:
    """Format an amount without the currency code (e.g. "123.456")."""
    return f"{to_money(amount):.{CURRENCY_DECIMALS}f}"


def format_price(amount: Number) -> str:
    """Format an amount as TND (e.g. "123.456 TND")."""
    return f"{format_amount(amount)} {CURRENCY_CODE}"

