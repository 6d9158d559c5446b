"""Remote cart and wishlist clients for the signed-in user."""

from libs.common.api_client import ApiClient
from services.cart_service.schemas import (
    CART_ITEMS_ADAPTER,
    WISHLIST_ITEMS_ADAPTER,
    CartItemCreate,
    CartItemUpdate,
    RemoteCartItem,
    RemoteWishlistItem,
    WishlistItemCreate,
)


class CartClient:
    """CRUD against ``/cart``. Errors propagate as ``httpx.HTTPError``."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list_items(self) -> list[RemoteCartItem]:
        data = await self.api.get("/cart")
        return CART_ITEMS_ADAPTER.validate_python(data or [])

    async def add_item(self, product_id: int, quantity: int = 1) -> RemoteCartItem:
        body = CartItemCreate(product_id=product_id, quantity=quantity)
        data = await self.api.post("/cart", json=body.model_dump(by_alias=True))
        return RemoteCartItem.model_validate(data)

    async def update_quantity(self, item_id: int, quantity: int) -> RemoteCartItem:
        body = CartItemUpdate(quantity=quantity)
        data = await self.api.put(
            f"/cart/{item_id}", json=body.model_dump(by_alias=True)
        )
        return RemoteCartItem.model_validate(data)

    async def remove_item(self, item_id: int) -> None:
        await self.api.delete(f"/cart/{item_id}")


class WishlistClient:
    """CRUD against ``/wishlist``."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list_items(self) -> list[RemoteWishlistItem]:
        data = await self.api.get("/wishlist")
        return WISHLIST_ITEMS_ADAPTER.validate_python(data or [])

    async def add_item(self, product_id: int) -> RemoteWishlistItem:
        body = WishlistItemCreate(product_id=product_id)
        data = await self.api.post("/wishlist", json=body.model_dump(by_alias=True))
        return RemoteWishlistItem.model_validate(data)

    async def remove_item(self, product_id: int) -> None:
        await self.api.delete(f"/wishlist/{product_id}")
