"""Pydantic schemas for the guest store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Optional, TypeVar

from libs.common.datetime_utils import as_utc
from libs.common.schemas import CamelModel, ProductSnapshot
from pydantic import TypeAdapter, field_validator

T = TypeVar("T")


class LocalCartEntry(CamelModel):
    # Stored as given; no lower bound
    product: ProductSnapshot
    quantity: int = 1


class LocalWishlistEntry(CamelModel):
    product_id: int
    product: ProductSnapshot
    date_added: datetime

    @field_validator("date_added")
    @classmethod
    def normalise_date_added(cls, v: datetime) -> datetime:
        return as_utc(v)


CART_ADAPTER = TypeAdapter(list[LocalCartEntry])
WISHLIST_ADAPTER = TypeAdapter(list[LocalWishlistEntry])


@dataclass
class StorageError:
    """Why a storage operation failed.

    ``corrupted`` distinguishes an unreadable stored payload (treated as an
    empty collection) from an I/O failure of the storage itself.
    """

    key: str
    operation: str
    reason: str
    corrupted: bool = False


@dataclass
class StorageResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[StorageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
