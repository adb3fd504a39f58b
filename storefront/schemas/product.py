# storefront/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductBase(SQLModel):
    """
    Shared fields for product read models.
    """

    name: str
    category: str
    description: str = ""
    price: float
    discount_percent: float = 0
    stock: int = 0
    brand: str = ""
    image_url: str | None = None
    featured: bool = False


class ProductCreate(SQLModel):
    """
    Payload for creating a product (admin).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    category: str = Field(max_length=50)
    description: str = ""
    price: float = Field(ge=0)
    discount_percent: float = Field(default=0, ge=0, le=100)
    stock: int = Field(default=0, ge=0)
    brand: str = ""
    image_url: str | None = None
    featured: bool = False

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(ProductBase):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    created_at: datetime


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=50)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    discount_percent: float | None = Field(default=None, ge=0, le=100)
    stock: int | None = Field(default=None, ge=0)
    brand: str | None = None
    image_url: str | None = None
    featured: bool | None = None

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class StockUpdate(SQLModel):
    """
    Admin payload to overwrite stock.
    """

    model_config = ConfigDict(extra="forbid")

    stock: int = Field(ge=0)
