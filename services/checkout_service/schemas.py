"""Pydantic schemas for checkout and orders."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import BaseModel, Field


class PaymentMethod(str, enum.Enum):
    COD = "cod"
    RAZORPAY = "razorpay"


class Address(CamelModel):
    id: Optional[int] = None
    address_name: Optional[str] = None
    full_name: str
    phone: str
    address: str
    landmark: Optional[str] = None
    city: str
    state: str
    pincode: str
    is_default: bool = False


class OrderLine(CamelModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class CreateOrderRequest(CamelModel):
    """``POST /orders`` body.

    Dump with ``exclude_none=True``: the wallet fields are only sent when
    coins are actually used.
    """

    user_id: int
    total: Decimal = Field(..., ge=0)
    status: str = "pending"
    payment_method: PaymentMethod = PaymentMethod.COD
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    shipping_details: str
    address_id: Optional[int] = None
    wallet_discount: Optional[Decimal] = None
    wallet_coins_used: Optional[int] = None
    items: Optional[list[OrderLine]] = None


class Order(CamelModel):
    id: int
    user_id: Optional[int] = None
    total: Decimal = Decimal("0")
    status: str = "pending"
    payment_method: Optional[str] = None
    wallet_discount: Optional[Decimal] = None
    wallet_coins_used: Optional[int] = None
    created_at: Optional[datetime] = None


class CheckoutTotals(BaseModel):
    subtotal: Decimal
    shipping: Decimal
    wallet_discount: Decimal
    wallet_coins_used: int
    total: Decimal
