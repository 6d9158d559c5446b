"""Transaction schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.schemas import CamelModel
from services.wallet_service.schemas.enums import TransactionDirection


class WalletTransaction(CamelModel):
    id: int
    user_id: Optional[int] = None
    type: TransactionDirection
    amount: Decimal
    description: str = ""
    order_id: Optional[int] = None
    created_at: datetime


class WalletTransactionList(CamelModel):
    transactions: list[WalletTransaction] = []
