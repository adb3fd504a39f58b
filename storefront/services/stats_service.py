# storefront/services/stats_service.py
from datetime import date, datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.order import Order
from storefront.repositories.coupon_repo import CouponRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.stats_repo import StatsRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.stats import (
    AdminDashboardStats,
    CouponStats,
    DailySales,
    OrderStats,
    ProductStats,
    TopProduct,
)
from storefront.schemas.user import UserSummary

LOW_STOCK_THRESHOLD = 10


def _month_window(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


class StatsService:
    """
    Orchestrates the aggregated admin dashboard.
    """

    def __init__(
        self,
        stats_repo: StatsRepository,
        order_repo: OrderRepository,
        user_repo: UserRepository,
        coupon_repo: CouponRepository,
    ):
        self.stats_repo = stats_repo
        self.order_repo = order_repo
        self.user_repo = user_repo
        self.coupon_repo = coupon_repo

    def get_dashboard(
        self,
        session: Session,
        year: int | None = None,
        month: int | None = None,
        top_n_products: int = 5,
    ) -> AdminDashboardStats:
        # Default to the current month
        today = datetime.now(timezone.utc).date()
        if year is None:
            year = today.year
        if month is None:
            month = today.month

        if not 1 <= month <= 12:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="month must be between 1 and 12",
            )

        by_status = self.stats_repo.orders_by_status(session)
        orders = OrderStats(
            total=sum(by_status.values()),
            revenue=round(self.stats_repo.total_revenue(session), 2),
            by_status=by_status,
        )

        by_category = self.stats_repo.products_by_category(session)
        products = ProductStats(
            total=sum(by_category.values()),
            low_stock=self.stats_repo.count_low_stock(session, LOW_STOCK_THRESHOLD),
            by_category=by_category,
        )

        roles = self.user_repo.count_by_role(session)
        users = UserSummary(
            total=sum(roles.values()),
            customers=roles.get("customer", 0),
            admins=roles.get("admin", 0),
        )

        coupons = CouponStats(
            total=self.coupon_repo.count(session),
            active=self.coupon_repo.count(session, active_at=datetime.now(timezone.utc)),
        )

        daily_sales: list[DailySales] = []
        start, end = _month_window(year, month)
        for day, revenue, order_count in self.stats_repo.daily_sales(session, start, end):
            # sqlite's date() hands back text
            if not isinstance(day, date):
                day = date.fromisoformat(str(day))
            daily_sales.append(
                DailySales(
                    date=day,
                    total_revenue=round(float(revenue or 0.0), 2),
                    order_count=int(order_count or 0),
                )
            )

        top_products = [
            TopProduct(
                product_id=product_id,
                name=name,
                total_quantity=int(total_quantity or 0),
                total_revenue=round(float(product_revenue or 0.0), 2),
            )
            for product_id, name, total_quantity, product_revenue in self.stats_repo.top_products(
                session, limit=top_n_products
            )
        ]

        return AdminDashboardStats(
            orders=orders,
            products=products,
            users=users,
            coupons=coupons,
            daily_sales=daily_sales,
            top_products=top_products,
        )

    def recent_orders(self, session: Session, limit: int = 10) -> list[Order]:
        return self.order_repo.list_all(session, 0, limit)
