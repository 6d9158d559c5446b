"""Redemption schemas: calculator output and the server round trips."""

from decimal import Decimal

from libs.common.schemas import CamelModel
from pydantic import BaseModel, ConfigDict, Field
from services.wallet_service.schemas.enums import RedemptionReferenceType


class RedemptionResult(BaseModel):
    """Coins that can be applied to the current cart and their rupee value.

    Derived, never persisted. ``discount == round(coins_to_use * ratio, 2)``.
    """

    model_config = ConfigDict(frozen=True)

    coins_to_use: int = Field(0, ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    applicable: bool = False


NOT_APPLICABLE = RedemptionResult()


class RedemptionValidationRequest(CamelModel):
    amount: Decimal
    coins_to_use: int = Field(..., ge=0)
    categories: list[str] = []


class RedemptionValidation(CamelModel):
    valid: bool
    coins_applicable: int = 0
    discount: Decimal = Decimal("0")
    message: str = ""


class RedeemRequest(CamelModel):
    amount: int = Field(..., gt=0)
    reference_type: RedemptionReferenceType = RedemptionReferenceType.ORDER
    reference_id: str
    description: str
