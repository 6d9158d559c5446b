"""Wallet coin redemption calculator.

Given the cart subtotal, the user's coin balance and the wallet policy,
work out how many coins may be applied and what they are worth:

1. no policy, a disabled policy, no balance or an empty cart → nothing;
2. subtotal below ``min_cart_value`` → nothing (no partial redemption);
3. ratio must be > 0 and the usage percentage within [0, 100];
4. max_discount  = subtotal * max_usage_percentage / 100;
5. max_coins_pct = floor(max_discount / ratio), at least 0;
6. coins         = min(balance, max_redeemable_coins, max_coins_pct), at least 0;
7. discount      = coins * ratio, rounded half-up to 2 places;
8. applicable    = coins > 0 and discount > 0.

The checkout preview and the order submission both go through
``compute_redemption`` so the two can never disagree. It is pure: recompute
whenever subtotal, balance or policy change. Toggling "use wallet" only
decides whether the result is applied; it never triggers a recompute.
"""

from decimal import Decimal
from typing import Optional, Union

from libs.common.currency import ZERO, coins_to_rupees, floor_coins, parse_decimal
from services.wallet_service.schemas import (
    NOT_APPLICABLE,
    IneligibilityReason,
    RedemptionResult,
    WalletPolicy,
)

HUNDRED = Decimal("100")

Amount = Union[Decimal, int, float, str]


def _gate(
    subtotal: Decimal, balance: int, policy: Optional[WalletPolicy]
) -> Optional[IneligibilityReason]:
    if policy is None:
        return IneligibilityReason.NO_POLICY
    if not policy.is_enabled:
        return IneligibilityReason.WALLET_DISABLED
    if balance <= 0:
        return IneligibilityReason.NO_BALANCE
    if subtotal <= ZERO:
        return IneligibilityReason.EMPTY_CART
    if subtotal < policy.min_cart_value:
        return IneligibilityReason.BELOW_MIN_CART_VALUE
    if policy.coin_to_currency_ratio <= ZERO:
        return IneligibilityReason.INVALID_POLICY
    if not ZERO <= policy.max_usage_percentage <= HUNDRED:
        return IneligibilityReason.INVALID_POLICY
    return None


def compute_redemption(
    subtotal: Amount, balance: int, policy: Optional[WalletPolicy]
) -> RedemptionResult:
    """Coins applicable to ``subtotal`` under ``policy`` with ``balance`` coins."""
    subtotal = parse_decimal(subtotal, ZERO)
    if _gate(subtotal, balance, policy) is not None:
        return NOT_APPLICABLE

    ratio = policy.coin_to_currency_ratio
    max_discount = subtotal * (policy.max_usage_percentage / HUNDRED)
    max_coins_by_percentage = max(0, floor_coins(max_discount / ratio))

    coins_to_use = max(
        0, min(balance, policy.max_redeemable_coins, max_coins_by_percentage)
    )
    discount = coins_to_rupees(coins_to_use, ratio)

    return RedemptionResult(
        coins_to_use=coins_to_use,
        discount=discount,
        applicable=coins_to_use > 0 and discount > ZERO,
    )


def ineligibility_reason(
    subtotal: Amount, balance: int, policy: Optional[WalletPolicy]
) -> Optional[IneligibilityReason]:
    """Why ``compute_redemption`` gives nothing for these inputs, or None."""
    subtotal = parse_decimal(subtotal, ZERO)
    reason = _gate(subtotal, balance, policy)
    if reason is not None:
        return reason
    if not compute_redemption(subtotal, balance, policy).applicable:
        return IneligibilityReason.NOTHING_REDEEMABLE
    return None
