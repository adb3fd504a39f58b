# storefront/routers/admin_stats.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.coupon_repo import CouponRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.stats_repo import StatsRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.order import OrderRead
from storefront.schemas.stats import AdminDashboardStats
from storefront.services.stats_service import StatsService

router = APIRouter(
    prefix="/admin",
    tags=["Admin Stats"],
    dependencies=[Depends(require_admin)],
)

service = StatsService(
    StatsRepository(), OrderRepository(), UserRepository(), CouponRepository()
)


@router.get("/dashboard", response_model=AdminDashboardStats)
def get_admin_dashboard(
    year: int | None = Query(default=None, ge=2000, le=9998),
    month: int | None = None,
    session: Session = Depends(get_session),
):
    """
    Aggregated statistics for the admin dashboard.

    Query params (optional):
      - year: defaults to current year
      - month: 1-12, defaults to current month (daily sales window)
    """
    return service.get_dashboard(session=session, year=year, month=month)


@router.get("/orders/recent", response_model=list[OrderRead])
def get_recent_orders(
    limit: int = Query(default=10, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """
    Latest orders of any status, newest first.
    """
    return service.recent_orders(session, limit)
