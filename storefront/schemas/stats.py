# storefront/schemas/stats.py
import uuid
from datetime import date

from pydantic import ConfigDict
from sqlmodel import SQLModel

from storefront.schemas.user import UserSummary


class DailySales(SQLModel):
    """
    Revenue per day for the requested month.
    """
    model_config = ConfigDict(extra="forbid")

    date: date
    total_revenue: float
    order_count: int


class TopProduct(SQLModel):
    """
    Best sellers by units across non-cancelled orders.
    """
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    name: str
    total_quantity: int
    total_revenue: float


class OrderStats(SQLModel):
    total: int
    revenue: float
    by_status: dict[str, int]


class ProductStats(SQLModel):
    total: int
    low_stock: int
    by_category: dict[str, int]


class CouponStats(SQLModel):
    total: int
    active: int


class AdminDashboardStats(SQLModel):
    """
    Full payload for the admin dashboard.
    """

    orders: OrderStats
    products: ProductStats
    users: UserSummary
    coupons: CouponStats
    daily_sales: list[DailySales]
    top_products: list[TopProduct]
