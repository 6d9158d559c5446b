"""Guest cart and wishlist persisted in on-device key-value storage.

Each collection is one JSON array stored under a fixed key. Every operation
reads the whole collection, changes it in memory and writes it back in a
single call, so callers see each operation as atomic.

Failures never reach the caller: reads fall back to an empty list and
mutations are skipped, with the reason logged. Internally every storage call
returns a ``StorageResult`` so that the fail-soft policy lives in one place.
"""

from typing import Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.common.schemas import ProductSnapshot
from libs.db.config import AsyncSessionLocal
from libs.db.config import engine as default_engine
from libs.db.session import create_all
from pydantic import TypeAdapter, ValidationError
from services.guest_store.models import LocalKeyValue
from services.guest_store.schemas import (
    CART_ADAPTER,
    WISHLIST_ADAPTER,
    LocalCartEntry,
    LocalWishlistEntry,
    StorageError,
    StorageResult,
)
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

logger = get_logger(__name__)


class LocalStore:
    """Guest cart/wishlist store.

    Concurrent mutation of the same collection is not supported; the UI is
    expected to serialise user actions.
    """

    def __init__(
        self,
        engine: Optional[AsyncEngine] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        cart_key: Optional[str] = None,
        wishlist_key: Optional[str] = None,
    ):
        settings = get_settings()
        if engine is None:
            engine = default_engine
            session_factory = session_factory or AsyncSessionLocal
        self.engine = engine
        self._session_factory = session_factory or async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False
        )
        self.cart_key = cart_key or settings.CART_STORAGE_KEY
        self.wishlist_key = wishlist_key or settings.WISHLIST_STORAGE_KEY

    async def init_schema(self) -> None:
        """Create the key-value table if it does not exist."""
        await create_all(self.engine)

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    async def _load_raw(self, key: str) -> StorageResult[Optional[str]]:
        try:
            async with self._session_factory() as session:
                row = await session.get(LocalKeyValue, key)
                return StorageResult(value=row.value if row else None)
        except SQLAlchemyError as e:
            return StorageResult(error=StorageError(key, "read", str(e)))

    async def _read_list(self, key: str, adapter: TypeAdapter) -> StorageResult[list]:
        raw = await self._load_raw(key)
        if not raw.ok:
            return StorageResult(error=raw.error)
        if raw.value is None:
            return StorageResult(value=[])
        try:
            return StorageResult(value=adapter.validate_json(raw.value))
        except ValidationError as e:
            # Stored shape mismatch (or invalid JSON) reads as empty
            return StorageResult(
                value=[],
                error=StorageError(key, "decode", str(e), corrupted=True),
            )

    async def _write_list(
        self, key: str, adapter: TypeAdapter, items: list
    ) -> StorageResult[None]:
        payload = adapter.dump_json(items, by_alias=True).decode("utf-8")
        try:
            async with self._session_factory() as session:
                await session.merge(LocalKeyValue(key=key, value=payload))
                await session.commit()
        except SQLAlchemyError as e:
            return StorageResult(error=StorageError(key, "write", str(e)))
        return StorageResult()

    async def _delete_key(self, key: str) -> StorageResult[None]:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(LocalKeyValue).where(LocalKeyValue.key == key)
                )
                await session.commit()
        except SQLAlchemyError as e:
            return StorageResult(error=StorageError(key, "delete", str(e)))
        return StorageResult()

    async def _load_for_update(
        self, key: str, adapter: TypeAdapter, action: str
    ) -> Optional[list]:
        """Read a collection before changing it.

        Returns None when the storage itself failed; the mutation is then
        skipped so a readable collection is never overwritten blindly.
        """
        result = await self._read_list(key, adapter)
        if result.ok:
            return result.value
        if result.error.corrupted:
            logger.warning(
                "Discarding unreadable %s before %s: %s",
                key,
                action,
                result.error.reason,
            )
            return []
        logger.error("Failed to %s in %s: %s", action, key, result.error.reason)
        return None

    async def _save(self, key: str, adapter: TypeAdapter, items: list, action: str):
        result = await self._write_list(key, adapter, items)
        if not result.ok:
            logger.error("Failed to %s in %s: %s", action, key, result.error.reason)

    async def _clear(self, key: str) -> None:
        result = await self._delete_key(key)
        if not result.ok:
            logger.error("Failed to clear %s: %s", key, result.error.reason)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    async def get_cart_items(self) -> list[LocalCartEntry]:
        result = await self._read_list(self.cart_key, CART_ADAPTER)
        if not result.ok:
            logger.error("Failed to get cart from storage: %s", result.error.reason)
        return result.value or []

    async def add_cart_item(self, product: ProductSnapshot, quantity: int = 1) -> None:
        """Add ``quantity`` of ``product``, incrementing an existing entry."""
        items = await self._load_for_update(self.cart_key, CART_ADAPTER, "add item")
        if items is None:
            return

        existing = next((i for i in items if i.product.id == product.id), None)
        if existing:
            existing.quantity += quantity
        else:
            items.append(LocalCartEntry(product=product, quantity=quantity))

        await self._save(self.cart_key, CART_ADAPTER, items, "add item")

    async def update_cart_quantity(self, product_id: int, quantity: int) -> None:
        """Overwrite the quantity of an existing entry; no-op when absent.

        The value is stored as given: no lower bound and no removal at zero.
        """
        items = await self._load_for_update(
            self.cart_key, CART_ADAPTER, "update quantity"
        )
        if items is None:
            return

        item = next((i for i in items if i.product.id == product_id), None)
        if item is None:
            return
        item.quantity = quantity
        await self._save(self.cart_key, CART_ADAPTER, items, "update quantity")

    async def remove_cart_item(self, product_id: int) -> None:
        items = await self._load_for_update(self.cart_key, CART_ADAPTER, "remove item")
        if items is None:
            return

        remaining = [i for i in items if i.product.id != product_id]
        await self._save(self.cart_key, CART_ADAPTER, remaining, "remove item")

    async def clear_cart(self) -> None:
        await self._clear(self.cart_key)

    # ------------------------------------------------------------------
    # Wishlist
    # ------------------------------------------------------------------

    async def get_wishlist_items(self) -> list[LocalWishlistEntry]:
        result = await self._read_list(self.wishlist_key, WISHLIST_ADAPTER)
        if not result.ok:
            logger.error(
                "Failed to get wishlist from storage: %s", result.error.reason
            )
        return result.value or []

    async def add_wishlist_item(self, product: ProductSnapshot) -> None:
        """Add ``product`` unless already present; the first ``date_added`` wins."""
        items = await self._load_for_update(
            self.wishlist_key, WISHLIST_ADAPTER, "add item"
        )
        if items is None:
            return

        if any(i.product_id == product.id for i in items):
            return
        items.append(
            LocalWishlistEntry(
                product_id=product.id, product=product, date_added=utc_now()
            )
        )
        await self._save(self.wishlist_key, WISHLIST_ADAPTER, items, "add item")

    async def remove_wishlist_item(self, product_id: int) -> None:
        items = await self._load_for_update(
            self.wishlist_key, WISHLIST_ADAPTER, "remove item"
        )
        if items is None:
            return

        remaining = [i for i in items if i.product_id != product_id]
        await self._save(self.wishlist_key, WISHLIST_ADAPTER, remaining, "remove item")

    async def clear_wishlist(self) -> None:
        await self._clear(self.wishlist_key)
