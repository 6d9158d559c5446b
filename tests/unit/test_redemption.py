"""Unit tests for the wallet redemption calculator.

Pure function, no I/O: each test builds a policy and checks the result.
"""

from decimal import Decimal

import pytest
from services.wallet_service.redemption import compute_redemption, ineligibility_reason
from services.wallet_service.schemas import NOT_APPLICABLE, IneligibilityReason
from tests.factories import WalletPolicyFactory


def _policy(**overrides):
    defaults = {
        "min_cart_value": Decimal("100"),
        "coin_to_currency_ratio": Decimal("0.5"),
        "max_redeemable_coins": 1000,
        "max_usage_percentage": Decimal("20"),
    }
    defaults.update(overrides)
    return WalletPolicyFactory.create(**defaults)


# ---------------------------------------------------------------------------
# Capping
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_percentage_cap_limits_coins():
    """500.00 cart, 1000 coins, 20% at 0.5/coin → 200 coins worth 100.00."""
    result = compute_redemption(Decimal("500.00"), 1000, _policy())

    assert result.coins_to_use == 200
    assert result.discount == Decimal("100.00")
    assert result.applicable is True


@pytest.mark.unit
def test_balance_cap_limits_coins():
    """Only 50 coins available → all 50 used."""
    result = compute_redemption(Decimal("500.00"), 50, _policy())

    assert result.coins_to_use == 50
    assert result.discount == Decimal("25.00")
    assert result.applicable is True


@pytest.mark.unit
def test_max_redeemable_coins_cap():
    """Policy ceiling wins when it is the smallest bound."""
    result = compute_redemption(
        Decimal("500.00"), 1000, _policy(max_redeemable_coins=30)
    )

    assert result.coins_to_use == 30
    assert result.discount == Decimal("15.00")


@pytest.mark.unit
def test_coins_never_exceed_any_bound():
    """coins_to_use <= min(balance, max coins, percentage cap) on a small grid."""
    policy = _policy(max_redeemable_coins=120)
    for subtotal in ("100", "150.50", "333.33", "999.99", "5000"):
        for balance in (1, 7, 119, 120, 121, 10_000):
            result = compute_redemption(Decimal(subtotal), balance, policy)
            assert 0 <= result.coins_to_use <= min(balance, 120)
            max_discount = Decimal(subtotal) * Decimal("0.20")
            assert result.coins_to_use * Decimal("0.5") <= max_discount
            assert result.discount <= max_discount + Decimal("0.005")


@pytest.mark.unit
def test_percentage_cap_floors_fractional_coins():
    """101.00 * 20% / 0.5 = 40.4 → 40 coins."""
    result = compute_redemption(Decimal("101.00"), 1000, _policy())

    assert result.coins_to_use == 40
    assert result.discount == Decimal("20.00")


@pytest.mark.unit
def test_discount_rounds_half_up_to_paise():
    """7 coins at 0.125 → 0.875 → 0.88."""
    result = compute_redemption(
        Decimal("500.00"),
        7,
        _policy(coin_to_currency_ratio=Decimal("0.125")),
    )

    assert result.coins_to_use == 7
    assert result.discount == Decimal("0.88")


@pytest.mark.unit
def test_accepts_string_and_float_subtotals():
    """Subtotals from the API may arrive as strings or floats."""
    policy = _policy()

    assert compute_redemption("500.00", 1000, policy).coins_to_use == 200
    assert compute_redemption(500.0, 1000, policy).coins_to_use == 200


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_below_min_cart_value_is_not_applicable():
    """No partial redemption below the minimum cart value."""
    policy = _policy(min_cart_value=Decimal("100"))

    assert compute_redemption(Decimal("99.99"), 1000, policy) == NOT_APPLICABLE
    assert (
        ineligibility_reason(Decimal("99.99"), 1000, policy)
        == IneligibilityReason.BELOW_MIN_CART_VALUE
    )


@pytest.mark.unit
def test_min_cart_value_is_inclusive():
    """A subtotal exactly at the minimum qualifies."""
    result = compute_redemption(Decimal("100"), 1000, _policy())

    assert result.coins_to_use == 40
    assert result.applicable is True


@pytest.mark.unit
@pytest.mark.parametrize(
    "subtotal, balance, expected",
    [
        (Decimal("500"), 0, IneligibilityReason.NO_BALANCE),
        (Decimal("500"), -5, IneligibilityReason.NO_BALANCE),
        (Decimal("0"), 1000, IneligibilityReason.EMPTY_CART),
    ],
)
def test_empty_inputs_are_not_applicable(subtotal, balance, expected):
    """Zero balance or an empty cart → (0, 0.00, false)."""
    result = compute_redemption(subtotal, balance, _policy(min_cart_value=Decimal("0")))

    assert result.coins_to_use == 0
    assert result.discount == Decimal("0")
    assert result.applicable is False
    assert ineligibility_reason(subtotal, balance, _policy(min_cart_value=0)) == expected


@pytest.mark.unit
def test_missing_policy_is_not_applicable():
    assert compute_redemption(Decimal("500"), 1000, None) == NOT_APPLICABLE
    assert ineligibility_reason(Decimal("500"), 1000, None) == IneligibilityReason.NO_POLICY


@pytest.mark.unit
def test_disabled_policy_is_not_applicable():
    policy = _policy(is_enabled=False)

    assert compute_redemption(Decimal("500"), 1000, policy) == NOT_APPLICABLE
    assert (
        ineligibility_reason(Decimal("500"), 1000, policy)
        == IneligibilityReason.WALLET_DISABLED
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"coin_to_currency_ratio": Decimal("0")},
        {"coin_to_currency_ratio": Decimal("-1")},
        {"max_usage_percentage": Decimal("-1")},
        {"max_usage_percentage": Decimal("100.01")},
    ],
)
def test_invalid_policy_is_not_applicable(overrides):
    """Out-of-range ratio or percentage never divides or over-discounts."""
    policy = _policy(**overrides)

    assert compute_redemption(Decimal("500"), 1000, policy) == NOT_APPLICABLE
    assert (
        ineligibility_reason(Decimal("500"), 1000, policy)
        == IneligibilityReason.INVALID_POLICY
    )


@pytest.mark.unit
def test_full_percentage_is_allowed():
    """100% usage is the upper edge of the valid range."""
    result = compute_redemption(
        Decimal("50"),
        1000,
        _policy(min_cart_value=Decimal("0"), max_usage_percentage=Decimal("100")),
    )

    assert result.coins_to_use == 100
    assert result.discount == Decimal("50.00")


@pytest.mark.unit
def test_zero_percentage_redeems_nothing():
    result = compute_redemption(
        Decimal("500"), 1000, _policy(max_usage_percentage=Decimal("0"))
    )

    assert result.coins_to_use == 0
    assert result.applicable is False
    assert (
        ineligibility_reason(Decimal("500"), 1000, _policy(max_usage_percentage=0))
        == IneligibilityReason.NOTHING_REDEEMABLE
    )


@pytest.mark.unit
def test_discount_rounding_to_zero_is_not_applicable():
    """1 coin at 0.001 rounds to 0.00 → coins reported, not applicable."""
    result = compute_redemption(
        Decimal("500"),
        1,
        _policy(coin_to_currency_ratio=Decimal("0.001")),
    )

    assert result.coins_to_use == 1
    assert result.discount == Decimal("0.00")
    assert result.applicable is False


@pytest.mark.unit
def test_is_deterministic():
    """Same inputs, same result: preview and submission cannot disagree."""
    policy = _policy()

    first = compute_redemption(Decimal("733.10"), 412, policy)
    second = compute_redemption(Decimal("733.10"), 412, policy)

    assert first == second


# ---------------------------------------------------------------------------
# Reference policy (min 200, ratio 0.5, 300 coins max, 20%)
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_reference_policy_at_500():
    """max_discount 100 → 200 coins by percentage; min(1000, 300, 200) = 200."""
    result = compute_redemption(Decimal("500"), 1000, WalletPolicyFactory.create())

    assert result.coins_to_use == 200
    assert result.discount == Decimal("100.00")
    assert result.applicable is True


@pytest.mark.unit
def test_reference_policy_below_minimum():
    result = compute_redemption(Decimal("100"), 500, WalletPolicyFactory.create())

    assert (result.coins_to_use, result.discount, result.applicable) == (
        0,
        Decimal("0"),
        False,
    )


@pytest.mark.unit
def test_reference_policy_coin_ceiling():
    """5000 cart → 1000 coins by percentage, capped at 300."""
    result = compute_redemption(Decimal("5000"), 1000, WalletPolicyFactory.create())

    assert result.coins_to_use == 300
    assert result.discount == Decimal("150.00")
