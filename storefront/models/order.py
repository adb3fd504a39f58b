# storefront/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order, created from the cart at checkout.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    delivery_address: str = Field(
        description="Full delivery address",
    )

    payment_method: str = Field(
        default="razorpay",
        description="Payment method chosen at checkout",
    )

    # pending | paid | failed (settled by the payment gateway)
    payment_status: str = Field(
        default="pending",
        index=True,
    )

    # processing | shipped | delivered | cancelled
    status: str = Field(
        default="processing",
        index=True,
        description="Order status lifecycle",
    )

    coupon_code: str | None = Field(
        default=None,
        max_length=50,
        description="Coupon redeemed at checkout, if any",
    )

    discount_amount: float = Field(
        default=0,
        description="Coupon discount taken off the line subtotal",
    )

    total_amount: float = Field(
        description="Sum of discounted line totals, less the coupon discount",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    `price` is the discounted unit price at the moment of checkout.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: float = Field(
        description="Unit price at time of order (after discount)",
    )
