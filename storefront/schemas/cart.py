# storefront/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart: {"productId": ..., "quantity": ...}.

    productId is optional at the schema level so a missing id gets the
    service's 400 "Product ID is required" instead of a generic 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: uuid.UUID | None = Field(default=None, alias="productId")
    quantity: int | None = None


class CartItemUpdate(SQLModel):
    """
    Payload for overwriting the quantity of a cart row.
    """

    quantity: int | None = None


class ProductRef(SQLModel):
    """
    Normalized product reference embedded in every cart line.
    """

    id: uuid.UUID
    name: str
    price: float
    discount_percent: float
    image_url: str | None = None
    category: str
    stock: int


class CartRowRead(SQLModel):
    """
    A single persisted cart row (POST / PUT responses).
    """

    id: uuid.UUID
    customer_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    added_at: datetime


class CartLineRead(CartRowRead):
    """
    Cart row joined to its live product, with discounted pricing.
    """

    product: ProductRef
    unit_price: float
    line_total: float


class CartView(SQLModel):
    """
    Full cart response: {"items": [...], "total": ..., "itemCount": ...}.
    """

    model_config = ConfigDict(populate_by_name=True)

    items: list[CartLineRead]
    total: float
    item_count: int = Field(alias="itemCount")


class CartCount(SQLModel):
    count: int
