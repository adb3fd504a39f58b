# storefront/schemas/wishlist.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from storefront.schemas.cart import ProductRef


class WishlistItemCreate(SQLModel):
    """
    {"productId": ...}; optional here so a missing id gets a 400.
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: uuid.UUID | None = Field(default=None, alias="productId")


class WishlistRowRead(SQLModel):
    id: uuid.UUID
    customer_id: uuid.UUID
    product_id: uuid.UUID
    added_at: datetime


class WishlistLineRead(WishlistRowRead):
    product: ProductRef


class WishlistView(SQLModel):
    items: list[WishlistLineRead]
    count: int


class WishlistCount(SQLModel):
    count: int
