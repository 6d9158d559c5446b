"""Wallet schemas package.

Re-exports all schemas so that ``from services.wallet_service.schemas import
WalletPolicy`` works.

IMPORTANT: Every schema class must be listed here.
When adding a new schema, add its import and __all__ entry.
"""

from services.wallet_service.schemas.balance import WalletBalance  # noqa: F401
from services.wallet_service.schemas.enums import (  # noqa: F401
    IneligibilityReason,
    RedemptionReferenceType,
    TransactionDirection,
)
from services.wallet_service.schemas.policy import WalletPolicy  # noqa: F401
from services.wallet_service.schemas.redemption import (  # noqa: F401
    NOT_APPLICABLE,
    RedeemRequest,
    RedemptionResult,
    RedemptionValidation,
    RedemptionValidationRequest,
)
from services.wallet_service.schemas.transaction import (  # noqa: F401
    WalletTransaction,
    WalletTransactionList,
)

__all__ = [
    "IneligibilityReason",
    "NOT_APPLICABLE",
    "RedeemRequest",
    "RedemptionReferenceType",
    "RedemptionResult",
    "RedemptionValidation",
    "RedemptionValidationRequest",
    "TransactionDirection",
    "WalletBalance",
    "WalletPolicy",
    "WalletTransaction",
    "WalletTransactionList",
]
