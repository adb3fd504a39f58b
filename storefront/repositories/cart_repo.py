# storefront/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from storefront.models.cart import CartRow
from storefront.models.product import Product

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CartRepository:
    """
    Data access layer for cart rows.

    - Pure DB operations, scoped by customer where it matters.
    - No quantity validation here; the service decides what is allowed.
    """

    # Rows for a customer, joined to their live product, newest first
    def list_with_products(
        self, session: Session, customer_id: uuid.UUID
    ) -> list[tuple[CartRow, Product]]:
        stmt = (
            select(CartRow, Product)
            .join(Product, Product.id == CartRow.product_id)
            .where(CartRow.customer_id == customer_id)
            .order_by(CartRow.added_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_for_customer(
        self, session: Session, customer_id: uuid.UUID
    ) -> list[CartRow]:
        stmt = select(CartRow).where(CartRow.customer_id == customer_id)
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, customer_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartRow | None:
        stmt = select(CartRow).where(
            CartRow.customer_id == customer_id, CartRow.product_id == product_id
        )
        return session.exec(stmt).first()

    def get_by_id(self, session: Session, row_id: uuid.UUID) -> CartRow | None:
        return session.get(CartRow, row_id)

    def count_quantity(self, session: Session, customer_id: uuid.UUID) -> int:
        stmt = select(func.coalesce(func.sum(CartRow.quantity), 0)).where(
            CartRow.customer_id == customer_id
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    # ---- writes ----

    def add_or_increment(
        self,
        session: Session,
        *,
        customer_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartRow:
        """
        Single-statement upsert keyed on (customer_id, product_id):

            INSERT ... ON CONFLICT (customer_id, product_id)
            DO UPDATE SET quantity = cart.quantity + excluded.quantity

        Two concurrent adds for the same pair can never produce two rows.
        """
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Cart upsert is not supported on '{dialect}'")

        table = CartRow.__table__
        stmt = insert(table).values(
            id=uuid.uuid4(),
            customer_id=customer_id,
            product_id=product_id,
            quantity=quantity,
            added_at=datetime.now(timezone.utc),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.customer_id, table.c.product_id],
            set_={"quantity": table.c.quantity + stmt.excluded.quantity},
        )
        session.exec(stmt)
        session.commit()

        row = self.get_item(session, customer_id, product_id)
        session.refresh(row)
        return row

    def update(self, session: Session, item: CartRow) -> CartRow:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartRow) -> None:
        session.delete(item)
        session.commit()

    def clear_customer_cart(
        self, session: Session, customer_id: uuid.UUID, *, commit: bool = True
    ) -> None:
        """
        Delete every row for a customer.

        Checkout passes commit=False so the clear lands in the order's
        transaction.
        """
        for row in self.list_for_customer(session, customer_id):
            session.delete(row)
        if commit:
            session.commit()
