# storefront/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartRow(SQLModel, table=True):
    """
    Shopping cart entry for an account.

    One account cannot have 2 rows for the same product: the unique
    constraint backs the atomic upsert in CartRepository.add_or_increment.
    Quantity is not range-checked at this layer.
    """

    __tablename__ = "cart"
    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", name="uq_cart_customer_product"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int

    added_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
