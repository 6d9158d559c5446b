"""Money helpers for the storefront.

Display / API unit: Rupees as decimals with two places (e.g. 499.00).
Wallet unit: Coins (integers); the coin value in rupees is set by the
server-side wallet policy (``coinToCurrencyRatio``).

The API sends amounts either as JSON numbers or as decimal-bearing strings
("0.50", "20.00"); everything is normalised to ``Decimal`` before use so that
no float rounding leaks into order totals.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

# ─── constants ───────────────────────────────────────────────────────────────

PAISE_QUANTUM = Decimal("0.01")
ZERO = Decimal("0")


# ─── conversion helpers ───────────────────────────────────────────────────────


def parse_decimal(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Parse a number or numeric string into a Decimal.

    Floats go through ``str`` first so 0.1 stays 0.1. Returns ``default`` for
    None, blank strings, NaN/infinity and anything unparseable.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return default
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return default
    if not parsed.is_finite():
        return default
    return parsed


def round_money(amount: Decimal) -> Decimal:
    """Round to two decimal places, half-up."""
    return amount.quantize(PAISE_QUANTUM, rounding=ROUND_HALF_UP)


def floor_coins(amount: Decimal) -> int:
    """Floor a (possibly fractional) coin count to a whole number of coins."""
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))


def coins_to_rupees(coins: int, ratio: Decimal) -> Decimal:
    """Rupee value of ``coins`` at ``ratio`` rupees per coin, rounded to paise."""
    return round_money(Decimal(coins) * ratio)
