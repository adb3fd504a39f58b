# storefront/models/coupon.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Coupon(SQLModel, table=True):
    """
    Percentage-off code applied to the whole order at checkout.

    Codes are stored upper-case; lookups upper-case the input.
    """

    __tablename__ = "coupons"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    code: str = Field(
        max_length=50,
        unique=True,
        index=True,
    )

    discount_percent: int = Field(
        ge=1,
        le=100,
        description="Percentage taken off the order subtotal",
    )

    expiry_date: datetime = Field(
        description="Last moment the code can be redeemed (UTC)",
    )

    max_uses: int = Field(default=100, ge=1)

    current_uses: int = Field(default=0, ge=0)

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
