"""Remote wallet client (balance, policy, transactions, redemption)."""

from decimal import Decimal
from typing import Iterable, Optional

from libs.common.api_client import ApiClient
from libs.common.logging import get_logger
from pydantic import ValidationError
from services.wallet_service.schemas import (
    RedeemRequest,
    RedemptionReferenceType,
    RedemptionValidation,
    RedemptionValidationRequest,
    WalletBalance,
    WalletPolicy,
    WalletTransaction,
    WalletTransactionList,
)

logger = get_logger(__name__)


class WalletClient:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_balance(self) -> int:
        """Current coin balance of the signed-in user."""
        data = await self.api.get("/wallet")
        return WalletBalance.model_validate(data or {}).balance

    async def get_policy(self) -> Optional[WalletPolicy]:
        """Fetch the redemption policy.

        An unparseable policy is logged and returned as None, which the
        calculator treats as "no redemption possible".
        """
        data = await self.api.get("/wallet/settings")
        try:
            return WalletPolicy.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring unparseable wallet settings: %s", e)
            return None

    async def list_transactions(self) -> list[WalletTransaction]:
        data = await self.api.get("/wallet/transactions")
        return WalletTransactionList.model_validate(data or {}).transactions

    async def validate_redemption(
        self,
        amount: Decimal,
        coins_to_use: int,
        categories: Iterable[str] = (),
    ) -> RedemptionValidation:
        """Ask the server whether ``coins_to_use`` may be applied to ``amount``."""
        body = RedemptionValidationRequest(
            amount=amount, coins_to_use=coins_to_use, categories=list(categories)
        )
        data = await self.api.post(
            "/wallet/validate-redemption",
            json=body.model_dump(mode="json", by_alias=True),
        )
        return RedemptionValidation.model_validate(data)

    async def redeem(
        self,
        coins: int,
        reference_id: str,
        description: str,
        reference_type: RedemptionReferenceType = RedemptionReferenceType.ORDER,
    ) -> None:
        """Debit ``coins`` from the wallet ledger against an order."""
        body = RedeemRequest(
            amount=coins,
            reference_type=reference_type,
            reference_id=reference_id,
            description=description,
        )
        await self.api.post(
            "/wallet/redeem", json=body.model_dump(mode="json", by_alias=True)
        )
