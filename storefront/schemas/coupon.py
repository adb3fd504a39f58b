# storefront/schemas/coupon.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


def _normalize_code(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().upper()
    return v or None


class CouponCreate(SQLModel):
    """
    Admin payload for a new coupon. `code` is upper-cased.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(min_length=1, max_length=50)
    discount_percent: int = Field(ge=1, le=100)
    expiry_date: datetime
    max_uses: int = Field(default=100, ge=1)

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        v = _normalize_code(v)
        if not v:
            raise ValueError("code cannot be empty")
        return v


class CouponUpdate(SQLModel):
    """
    Partial update; omitted fields are left alone.
    """

    model_config = ConfigDict(extra="forbid")

    discount_percent: int | None = Field(default=None, ge=1, le=100)
    expiry_date: datetime | None = None
    max_uses: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class CouponRead(SQLModel):
    id: uuid.UUID
    code: str
    discount_percent: int
    expiry_date: datetime
    max_uses: int
    current_uses: int
    is_active: bool
    created_at: datetime


class CouponValidateRequest(SQLModel):
    code: str | None = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str | None) -> str | None:
        return _normalize_code(v)


class CouponValidation(SQLModel):
    valid: bool
    message: str
    coupon: CouponRead
