"""Login-time orchestration of the guest merge.

Runs at the authentication boundary, once per successful login:

1. fetch the server cart and wishlist concurrently;
2. merge the guest data (this clears the local store);
3. push every created or changed item, each push independent of the others.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable

import httpx
from libs.common.logging import get_logger
from pydantic import ValidationError
from services.cart_service.client import CartClient, WishlistClient
from services.cart_service.reconciliation import ReconciliationEngine
from services.cart_service.schemas import RemoteCartItem, RemoteWishlistItem
from services.guest_store.store import LocalStore

logger = get_logger(__name__)


@dataclass
class SyncReport:
    """Outcome of one guest sync.

    ``skipped`` means the server lists could not be fetched; nothing was
    merged and the guest data is still in the local store.
    """

    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: bool = False
    cart: list[RemoteCartItem] = field(default_factory=list)
    wishlist: list[RemoteWishlistItem] = field(default_factory=list)


@dataclass
class _Push:
    kind: str  # created|updated
    label: str
    call: Awaitable


async def sync_guest_data(
    store: LocalStore,
    cart_client: CartClient,
    wishlist_client: WishlistClient,
) -> SyncReport:
    """Fold guest cart/wishlist into the server and push the differences."""
    server_cart, server_wishlist = await asyncio.gather(
        cart_client.list_items(),
        wishlist_client.list_items(),
        return_exceptions=True,
    )

    fetch_failed = False
    for name, result in (("cart", server_cart), ("wishlist", server_wishlist)):
        if not isinstance(result, BaseException):
            continue
        if not isinstance(result, (httpx.HTTPError, ValidationError)):
            raise result
        logger.error(
            "Could not fetch server %s; guest data kept for next login: %s",
            name,
            result,
        )
        fetch_failed = True
    if fetch_failed:
        return SyncReport(skipped=True)

    original_quantities = {
        item.id: item.quantity for item in server_cart if not item.is_pending
    }

    engine = ReconciliationEngine(store)
    merged_cart = await engine.merge_cart(server_cart)
    merged_wishlist = await engine.merge_wishlist(server_wishlist)

    pushes: list[_Push] = []
    for item in merged_cart:
        if item.is_pending:
            pushes.append(
                _Push(
                    "created",
                    f"cart product {item.product_id}",
                    cart_client.add_item(item.product_id, item.quantity),
                )
            )
        elif item.quantity != original_quantities.get(item.id):
            pushes.append(
                _Push(
                    "updated",
                    f"cart item {item.id}",
                    cart_client.update_quantity(item.id, item.quantity),
                )
            )
    for item in merged_wishlist:
        if item.is_pending:
            pushes.append(
                _Push(
                    "created",
                    f"wishlist product {item.product_id}",
                    wishlist_client.add_item(item.product_id),
                )
            )

    results = await asyncio.gather(*(p.call for p in pushes), return_exceptions=True)

    report = SyncReport(cart=merged_cart, wishlist=merged_wishlist)
    for push, result in zip(pushes, results):
        if isinstance(result, Exception):
            # Local copy is already cleared; this guest item is lost
            logger.warning(
                "Failed to push %s: %s", push.label, result, extra={"push": push.kind}
            )
            report.failed += 1
        elif push.kind == "created":
            report.created += 1
        else:
            report.updated += 1

    logger.info(
        "Guest sync finished: created=%d updated=%d failed=%d",
        report.created,
        report.updated,
        report.failed,
    )
    return report
