"""Timezone-aware UTC timestamps for stored and wire data.

Usage:
    from libs.common.datetime_utils import utc_now

    entry = LocalWishlistEntry(product_id=7, product=product, date_added=utc_now())
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; convert an aware one to UTC.

    Older stored entries and some API payloads carry naive ISO strings; they
    are taken to be UTC so they compare with ``utc_now()``.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
