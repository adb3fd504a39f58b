# storefront/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    The cart never owns product data: authenticated cart totals re-join
    the live row, so price / discount edits show up on the next read.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    category: str = Field(
        max_length=50,
        index=True,
        description="Catalog section (groceries, electronics, fashion, ...)",
    )

    description: str = Field(default="")

    price: float = Field(
        ge=0,
        description="Unit list price",
    )

    # 0 => no discount
    discount_percent: float = Field(
        default=0,
        ge=0,
        le=100,
        description="Percentage taken off the list price",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    brand: str = Field(default="")

    image_url: str | None = Field(
        default=None,
        description="Main image URL (Supabase Storage public URL)",
    )

    featured: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
