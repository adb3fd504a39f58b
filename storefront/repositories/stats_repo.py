# storefront/repositories/stats_repo.py
from datetime import datetime

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.order import Order, OrderItem
from storefront.models.product import Product


class StatsRepository:
    """
    Read-only aggregates for the admin dashboard.

    Queries stay portable between Postgres and SQLite: month windows are
    timestamp ranges, and days come from date().
    """

    def orders_by_status(self, session: Session) -> dict[str, int]:
        stmt = select(Order.status, func.count()).group_by(Order.status)
        return {s: int(n) for s, n in session.exec(stmt).all()}

    def total_revenue(self, session: Session) -> float:
        """
        Sum of total_amount over orders that were not cancelled.
        """
        stmt = select(func.coalesce(func.sum(Order.total_amount), 0.0)).where(
            Order.status != "cancelled"
        )
        return float(session.exec(stmt).one() or 0.0)

    def products_by_category(self, session: Session) -> dict[str, int]:
        stmt = select(Product.category, func.count()).group_by(Product.category)
        return {c: int(n) for c, n in session.exec(stmt).all()}

    def count_low_stock(self, session: Session, threshold: int) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.stock <= threshold)
        return int(session.exec(stmt).one() or 0)

    def daily_sales(
        self, session: Session, start: datetime, end: datetime
    ) -> list[tuple]:
        """
        (day, revenue, order_count) per day in [start, end), cancelled
        orders excluded. `day` is a date on Postgres, an ISO string on SQLite.
        """
        day_expr = func.date(Order.created_at)
        stmt = (
            select(
                day_expr.label("day"),
                func.coalesce(func.sum(Order.total_amount), 0.0).label("revenue"),
                func.count(Order.id).label("order_count"),
            )
            .where(
                Order.status != "cancelled",
                Order.created_at >= start,
                Order.created_at < end,
            )
            .group_by(day_expr)
            .order_by(day_expr)
        )
        return list(session.exec(stmt).all())

    def top_products(self, session: Session, limit: int = 5) -> list[tuple]:
        qty_sum = func.coalesce(func.sum(OrderItem.quantity), 0)
        revenue_sum = func.coalesce(func.sum(OrderItem.quantity * OrderItem.price), 0.0)

        stmt = (
            select(
                OrderItem.product_id,
                Product.name,
                qty_sum.label("total_quantity"),
                revenue_sum.label("total_revenue"),
            )
            .join(Order, Order.id == OrderItem.order_id)
            .join(Product, Product.id == OrderItem.product_id)
            .where(Order.status != "cancelled")
            .group_by(OrderItem.product_id, Product.name)
            .order_by(qty_sum.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())
