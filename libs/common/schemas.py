"""Shared pydantic building blocks for storefront API payloads."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes the API's camelCase field names.

    Python code uses snake_case attributes; dump with ``by_alias=True`` to get
    the wire shape back.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductSnapshot(CamelModel):
    """Copy of the product fields captured when a guest adds it.

    Extra product fields are kept so the snapshot round-trips through storage.
    The snapshot is never refreshed against the live catalogue.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    name: str = ""
    price: Decimal = Decimal("0")
    mrp: Optional[Decimal] = None
    image_url: Optional[str] = None
