"""Guest-to-account reconciliation.

Folds the guest cart and wishlist held in the local store into the signed-in
user's server lists. The fold itself is pure and synchronous; the engine
brackets it with the async local read and the local clear. The engine never
talks to the network: callers push the returned lists (see ``sync.py``).

Conflict rules:
- cart: the same product on both sides keeps the higher quantity (not the
  sum), so repeating a merge never inflates quantities;
- wishlist: a product already on the server is kept as-is, guest-only
  products are appended with their original ``date_added``.

New entries are appended as pending items (``id`` None, ``0`` on the wire).
"""

from libs.common.logging import get_logger
from services.cart_service.schemas import RemoteCartItem, RemoteWishlistItem
from services.guest_store.schemas import LocalCartEntry, LocalWishlistEntry
from services.guest_store.store import LocalStore

logger = get_logger(__name__)


def fold_cart(
    server_items: list[RemoteCartItem], local_entries: list[LocalCartEntry]
) -> list[RemoteCartItem]:
    """Merge ``local_entries`` into ``server_items`` in place and return it.

    Guest entries with a quantity below 1 are dropped; the server never
    holds such a line.
    """
    by_product = {item.product_id: item for item in server_items}

    for entry in local_entries:
        if entry.quantity < 1:
            logger.warning(
                "Dropping guest cart product %s with quantity %d",
                entry.product.id,
                entry.quantity,
            )
            continue

        server_item = by_product.get(entry.product.id)
        if server_item:
            server_item.quantity = max(server_item.quantity, entry.quantity)
            continue

        pending = RemoteCartItem(
            product_id=entry.product.id,
            quantity=entry.quantity,
            product=entry.product,
        )
        server_items.append(pending)
        by_product[entry.product.id] = pending

    return server_items


def fold_wishlist(
    server_items: list[RemoteWishlistItem], local_entries: list[LocalWishlistEntry]
) -> list[RemoteWishlistItem]:
    """Append guest-only wishlist entries to ``server_items`` and return it."""
    seen = {item.product_id for item in server_items}

    for entry in local_entries:
        if entry.product_id in seen:
            continue
        server_items.append(
            RemoteWishlistItem(
                product_id=entry.product_id,
                product=entry.product,
                date_added=entry.date_added,
            )
        )
        seen.add(entry.product_id)

    return server_items


class ReconciliationEngine:
    """Runs the guest merge against one local store.

    The local collection is cleared as soon as the merge is computed, before
    anything is pushed to the server. A failed push afterwards therefore
    loses that guest item, but a retried login can never apply the same
    guest data twice.
    """

    def __init__(self, store: LocalStore):
        self.store = store

    async def merge_cart(self, server_items: list[RemoteCartItem]) -> list[RemoteCartItem]:
        local_entries = await self.store.get_cart_items()
        server_count = len(server_items)

        merged = fold_cart(server_items, local_entries)

        await self.store.clear_cart()
        logger.info(
            "Merged %d guest cart entries into %d server items (%d new)",
            len(local_entries),
            server_count,
            sum(1 for item in merged if item.is_pending),
        )
        return merged

    async def merge_wishlist(
        self, server_items: list[RemoteWishlistItem]
    ) -> list[RemoteWishlistItem]:
        local_entries = await self.store.get_wishlist_items()
        server_count = len(server_items)

        merged = fold_wishlist(server_items, local_entries)

        await self.store.clear_wishlist()
        logger.info(
            "Merged %d guest wishlist entries into %d server items (%d new)",
            len(local_entries),
            server_count,
            sum(1 for item in merged if item.is_pending),
        )
        return merged
