# storefront/repositories/order_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.order import Order, OrderItem


class OrderRepository:
    """
    Orders and their line items.

    Nothing here commits: checkout writes the order, its items and the
    cart clear in one transaction owned by the service.
    """

    def _newest_first(self, stmt, skip: int, limit: int):
        return stmt.order_by(col(Order.created_at).desc()).offset(skip).limit(limit)

    def list_for_customer(
        self,
        session: Session,
        customer_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order).where(Order.customer_id == customer_id)
        return list(session.exec(self._newest_first(stmt, skip, limit)).all())

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
    ) -> list[Order]:
        stmt = select(Order)
        if status:
            stmt = stmt.where(Order.status == status)
        return list(session.exec(self._newest_first(stmt, skip, limit)).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def items_for(self, session: Session, order_id: uuid.UUID) -> list[OrderItem]:
        return list(
            session.exec(select(OrderItem).where(OrderItem.order_id == order_id)).all()
        )

    def add_with_items(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> tuple[Order, list[OrderItem]]:
        """
        Stage an order and its items. The order is flushed first so the
        items can point at its id.
        """
        session.add(order)
        session.flush()
        for item in items:
            item.order_id = order.id
        session.add_all(items)
        session.flush()
        return order, items

    def stage(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order
