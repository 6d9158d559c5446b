"""Wallet policy schema (``GET /wallet/settings``)."""

from decimal import Decimal
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import field_validator


class WalletPolicy(CamelModel):
    """Server-configured redemption rules.

    The API sends the decimal fields as strings ("0.50", "20.00"). Ranges
    are not checked here; the redemption calculator treats an out-of-range
    policy as not applicable.
    """

    min_cart_value: Decimal = Decimal("0")
    coin_to_currency_ratio: Decimal
    max_redeemable_coins: int = 0
    max_usage_percentage: Decimal
    is_enabled: bool = True
    applicable_categories: Optional[str] = None

    @field_validator("min_cart_value", mode="before")
    @classmethod
    def blank_min_cart_value(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "0"
        return v
