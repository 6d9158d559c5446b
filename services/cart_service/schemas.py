"""Pydantic schemas for the server-side cart and wishlist."""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import as_utc
from libs.common.schemas import CamelModel, ProductSnapshot
from pydantic import Field, TypeAdapter, field_serializer, field_validator, model_validator

# Wire value the API uses for "not created on the server yet"
PENDING_ID = 0


class RemoteItemBase(CamelModel):
    """Server record identity.

    ``id`` is None while the record is pending (not created on the server)
    and the server-assigned integer once persisted. On the wire a pending
    identity is the sentinel ``0``.
    """

    id: Optional[int] = None
    user_id: Optional[int] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def sentinel_to_pending(cls, v):
        if v is None or v == PENDING_ID:
            return None
        return v

    @field_serializer("id", "user_id")
    def pending_to_sentinel(self, v: Optional[int]) -> int:
        return PENDING_ID if v is None else v

    @property
    def is_pending(self) -> bool:
        return self.id is None


class RemoteCartItem(RemoteItemBase):
    product_id: Optional[int] = None
    quantity: int = Field(1, ge=0)
    product: Optional[ProductSnapshot] = None

    @model_validator(mode="after")
    def resolve_product_id(self):
        if self.product_id is None:
            if self.product is None:
                raise ValueError("cart item needs productId or product")
            self.product_id = self.product.id
        return self


class RemoteWishlistItem(RemoteItemBase):
    product_id: Optional[int] = None
    product: Optional[ProductSnapshot] = None
    date_added: Optional[datetime] = None

    @field_validator("date_added")
    @classmethod
    def normalise_date_added(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None

    @model_validator(mode="after")
    def resolve_product_id(self):
        if self.product_id is None:
            if self.product is None:
                raise ValueError("wishlist item needs productId or product")
            self.product_id = self.product.id
        return self


class CartItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class CartItemUpdate(CamelModel):
    quantity: int = Field(..., ge=0)


class WishlistItemCreate(CamelModel):
    product_id: int


CART_ITEMS_ADAPTER = TypeAdapter(list[RemoteCartItem])
WISHLIST_ITEMS_ADAPTER = TypeAdapter(list[RemoteWishlistItem])
