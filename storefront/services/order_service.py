# storefront/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.order import Order, OrderItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from storefront.services.cart_service import discounted_price
from storefront.services.coupon_service import CouponService

logger = logging.getLogger(__name__)

# Admin status moves; delivered and cancelled are final
STATUS_TRANSITIONS: dict[str, set[str]] = {
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Order not found",
    )


def order_with_items(order: Order, items: list[OrderItem]) -> OrderWithItemsRead:
    return OrderWithItemsRead(
        **order.model_dump(),
        items=[
            OrderItemRead(
                **item.model_dump(),
                line_total=round(item.price * item.quantity, 2),
            )
            for item in items
        ],
    )


class OrderService:
    """
    Checkout and order tracking.

    Checkout is the hand-off point from the server cart: the cart rows
    are priced (discount applied), copied into order items and removed,
    all in a single commit. An optional coupon takes its percentage off
    the line subtotal and its use is counted in that same commit.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        coupon_service: CouponService,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.coupon_service = coupon_service

    # -------- Customer --------

    def create_order_from_cart(
        self,
        session: Session,
        customer_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderWithItemsRead:
        if not payload.delivery_address:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Delivery address is required",
            )

        rows = self.cart_repo.list_with_products(session, customer_id)
        if not rows:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # Unit prices are frozen at checkout time
        items = [
            OrderItem(
                product_id=product.id,
                quantity=row.quantity,
                price=round(discounted_price(product), 2),
            )
            for row, product in rows
        ]
        subtotal = round(sum(i.price * i.quantity for i in items), 2)

        discount = 0.0
        if payload.coupon_code:
            coupon = self.coupon_service.redeem(session, payload.coupon_code)
            discount = round(subtotal * coupon.discount_percent / 100, 2)

        order = Order(
            customer_id=customer_id,
            delivery_address=payload.delivery_address,
            payment_method=payload.payment_method,
            payment_status="pending",
            status="processing",
            coupon_code=payload.coupon_code,
            discount_amount=discount,
            total_amount=round(subtotal - discount, 2),
        )

        order, items = self.order_repo.add_with_items(session, order, items)
        self.cart_repo.clear_customer_cart(session, customer_id, commit=False)
        session.commit()

        session.refresh(order)
        for item in items:
            session.refresh(item)
        logger.info(
            "Order %s placed by %s: %d lines, total %.2f",
            order.id,
            customer_id,
            len(items),
            order.total_amount,
        )
        return order_with_items(order, items)

    def list_customer_orders(
        self,
        session: Session,
        customer_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        return self.order_repo.list_for_customer(session, customer_id, skip, limit)

    def get_customer_order(
        self,
        session: Session,
        customer_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        Raises:
            HTTPException(404): unknown order.
            HTTPException(403): order belongs to another customer.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            raise _not_found()
        if order.customer_id != customer_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return order_with_items(order, self.order_repo.items_for(session, order.id))

    # -------- Admin --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[Order]:
        return self.order_repo.list_all(session, skip, limit, status=status_filter)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            raise _not_found()

        if payload.status == order.status:
            return order

        if payload.status not in STATUS_TRANSITIONS.get(order.status, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {order.status} -> {payload.status}",
            )

        order.status = payload.status
        self.order_repo.stage(session, order)
        session.commit()
        session.refresh(order)
        return order
