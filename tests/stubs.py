"""
In-process stand-in for the storefront REST API.

``create_app(storefront)`` builds a FastAPI app over an in-memory
``FakeStorefront``; tests reach it through ``httpx.ASGITransport`` so the real
``ApiClient`` and remote clients are exercised end to end.
"""

from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse


class FakeStorefront:
    """Server-side state plus knobs for failure injection."""

    def __init__(self):
        self.user: Optional[dict] = None
        self.products: dict[int, dict] = {}
        self.cart: list[dict] = []
        self.wishlist: list[dict] = []
        self.balance: int = 0
        self.settings: dict = {}
        self.transactions: list[dict] = []
        self.validation: Optional[dict] = None
        self.orders: list[dict] = []
        self.redemptions: list[dict] = []
        # (method, path) pairs answered with a 500
        self.failing_routes: set[tuple[str, str]] = set()
        # product ids whose POST /cart or POST /wishlist fails
        self.failing_products: set[int] = set()
        self.calls: list[tuple[str, str, Any]] = []
        self._next_id = 500

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def product(self, product_id: int) -> dict:
        return self.products.get(
            product_id, {"id": product_id, "name": f"Product {product_id}", "price": 100}
        )

    def add_cart_line(self, product: dict, quantity: int) -> dict:
        self.products[product["id"]] = product
        line = {
            "id": self.next_id(),
            "userId": (self.user or {}).get("id", 0),
            "quantity": quantity,
            "product": product,
        }
        self.cart.append(line)
        return line

    def add_wishlist_line(self, product: dict, date_added: str) -> dict:
        self.products[product["id"]] = product
        line = {
            "id": self.next_id(),
            "userId": (self.user or {}).get("id", 0),
            "productId": product["id"],
            "product": product,
            "dateAdded": date_added,
        }
        self.wishlist.append(line)
        return line

    def calls_to(self, method: str, path: str) -> list[Any]:
        return [body for m, p, body in self.calls if m == method and p == path]


def create_app(storefront: FakeStorefront) -> FastAPI:
    """Create the fake storefront API app."""
    app = FastAPI(title="Fake Storefront API")
    router = APIRouter(prefix="/api")

    @app.middleware("http")
    async def inject_failures(request: Request, call_next):
        if (request.method, request.url.path) in storefront.failing_routes:
            return JSONResponse({"message": "Injected failure"}, status_code=500)
        return await call_next(request)

    def record(method: str, path: str, body: Any = None) -> None:
        storefront.calls.append((method, path, body))

    # -- cart -------------------------------------------------------------

    @router.get("/cart")
    async def list_cart():
        record("GET", "/cart")
        return storefront.cart

    @router.post("/cart")
    async def add_to_cart(payload: dict):
        record("POST", "/cart", payload)
        product_id = payload["productId"]
        if product_id in storefront.failing_products:
            raise HTTPException(status_code=500, detail="Could not add to cart")
        return storefront.add_cart_line(
            storefront.product(product_id), payload.get("quantity", 1)
        )

    @router.put("/cart/{item_id}")
    async def update_cart(item_id: int, payload: dict):
        record("PUT", f"/cart/{item_id}", payload)
        for line in storefront.cart:
            if line["id"] == item_id:
                line["quantity"] = payload["quantity"]
                return line
        raise HTTPException(status_code=404, detail="Cart item not found")

    @router.delete("/cart/{item_id}")
    async def delete_cart(item_id: int):
        record("DELETE", f"/cart/{item_id}")
        storefront.cart = [line for line in storefront.cart if line["id"] != item_id]
        return {"success": True}

    # -- wishlist ---------------------------------------------------------

    @router.get("/wishlist")
    async def list_wishlist():
        record("GET", "/wishlist")
        return storefront.wishlist

    @router.post("/wishlist")
    async def add_to_wishlist(payload: dict):
        record("POST", "/wishlist", payload)
        product_id = payload["productId"]
        if product_id in storefront.failing_products:
            raise HTTPException(status_code=500, detail="Could not add to wishlist")
        return storefront.add_wishlist_line(
            storefront.product(product_id), "2026-10-17T00:00:00+00:00"
        )

    @router.delete("/wishlist/{product_id}")
    async def delete_wishlist(product_id: int):
        record("DELETE", f"/wishlist/{product_id}")
        storefront.wishlist = [
            line for line in storefront.wishlist if line["productId"] != product_id
        ]
        return {"success": True}

    # -- wallet -----------------------------------------------------------

    @router.get("/wallet")
    async def wallet_details():
        record("GET", "/wallet")
        return {
            "id": 1,
            "userId": (storefront.user or {}).get("id", 0),
            "balance": storefront.balance,
            "coins": storefront.balance,
        }

    @router.get("/wallet/settings")
    async def wallet_settings():
        record("GET", "/wallet/settings")
        return storefront.settings

    @router.get("/wallet/transactions")
    async def wallet_transactions():
        record("GET", "/wallet/transactions")
        return {"transactions": storefront.transactions}

    @router.post("/wallet/validate-redemption")
    async def validate_redemption(payload: dict):
        record("POST", "/wallet/validate-redemption", payload)
        if storefront.validation is not None:
            return storefront.validation
        ratio = Decimal(str(storefront.settings.get("coinToCurrencyRatio", "1")))
        coins = payload["coinsToUse"]
        return {
            "valid": True,
            "coinsApplicable": coins,
            "discount": str(coins * ratio),
            "message": "Coins can be applied",
        }

    @router.post("/wallet/redeem")
    async def redeem(payload: dict):
        record("POST", "/wallet/redeem", payload)
        storefront.redemptions.append(payload)
        storefront.balance -= payload["amount"]
        return {"success": True}

    # -- orders -----------------------------------------------------------

    @router.post("/orders")
    async def create_order(payload: dict):
        record("POST", "/orders", payload)
        order = {**payload, "id": storefront.next_id()}
        storefront.orders.append(order)
        return order

    # -- auth -------------------------------------------------------------

    @router.get("/auth/me")
    async def current_user():
        record("GET", "/auth/me")
        if storefront.user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return storefront.user

    @router.post("/logout")
    async def logout():
        record("POST", "/logout")
        storefront.user = None
        return {"success": True}

    app.include_router(router)
    return app
