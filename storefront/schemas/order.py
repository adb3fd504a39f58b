# storefront/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

OrderStatus = Literal["processing", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed"]


class OrderCreate(SQLModel):
    """
    Payload for placing an order from the current cart.

    User provides:
      - deliveryAddress
      - paymentMethod (optional)
      - couponCode (optional, upper-cased)

    Backend derives:
      - customer_id from token
      - items and prices from the cart (discount applied)
      - status = 'processing', payment_status = 'pending'
    """

    model_config = ConfigDict(populate_by_name=True)

    delivery_address: str | None = Field(default=None, alias="deliveryAddress")
    payment_method: str = Field(default="razorpay", alias="paymentMethod")
    coupon_code: str | None = Field(default=None, alias="couponCode")

    @field_validator("delivery_address")
    @classmethod
    def normalize_address(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("coupon_code")
    @classmethod
    def normalize_coupon(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().upper()
        return v or None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    customer_id: uuid.UUID
    delivery_address: str
    payment_method: str
    payment_status: PaymentStatus
    status: OrderStatus
    coupon_code: str | None = None
    discount_amount: float = 0
    total_amount: float
    created_at: datetime


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price: float
    line_total: float


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
