"""Enums for the wallet schemas."""

import enum


class TransactionDirection(str, enum.Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class RedemptionReferenceType(str, enum.Enum):
    ORDER = "ORDER"


class IneligibilityReason(str, enum.Enum):
    """Why no coins can be applied to the current cart."""

    NO_POLICY = "no_policy"
    WALLET_DISABLED = "wallet_disabled"
    NO_BALANCE = "no_balance"
    EMPTY_CART = "empty_cart"
    BELOW_MIN_CART_VALUE = "below_min_cart_value"
    INVALID_POLICY = "invalid_policy"
    NOTHING_REDEEMABLE = "nothing_redeemable"
