"""Balance schemas."""

from typing import Optional

from libs.common.schemas import CamelModel


class WalletBalance(CamelModel):
    id: Optional[int] = None
    user_id: Optional[int] = None
    balance: int = 0
