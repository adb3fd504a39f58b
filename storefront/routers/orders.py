# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_admin, require_customer
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.coupon_repo import CouponRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from storefront.services.coupon_service import CouponService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
service = OrderService(order_repo, cart_repo, CouponService(CouponRepository()))


# -------- Customer endpoints --------


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Place an order from the current cart.

    Every cart row becomes an order item at its current discounted
    price, and the cart is emptied. `couponCode` is checked and redeemed
    in the same transaction.
    """
    return service.create_order_from_cart(session, current_user.id, payload)


@router.get("", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated customer's orders (without items).
    """
    return service.list_customer_orders(session, current_user.id, skip, limit)


# -------- Admin endpoints --------


@router.get(
    "/admin/all",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    skip: int = 0,
    limit: int = 50,
):
    """
    Every order, newest first; `?status=` narrows to one stage.
    """
    return service.list_all_orders(session, skip, limit, status_filter=order_status)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

      processing -> shipped, cancelled

      shipped    -> delivered
    """
    return service.update_status(session, order_id, payload)


# -------- Customer endpoints (by id) --------


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Get a single order (with items) belonging to the current customer.
    """
    return service.get_customer_order(session, current_user.id, order_id)
