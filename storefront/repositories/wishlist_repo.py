# storefront/repositories/wishlist_repo.py
import uuid

from sqlalchemy import delete, func
from sqlmodel import Session, col, select

from storefront.models.product import Product
from storefront.models.wishlist import WishlistRow


class WishlistRepository:
    """
    Saved-for-later rows, always scoped to one customer.
    """

    def list_with_products(
        self, session: Session, customer_id: uuid.UUID
    ) -> list[tuple[WishlistRow, Product]]:
        stmt = (
            select(WishlistRow, Product)
            .join(Product, Product.id == WishlistRow.product_id)
            .where(WishlistRow.customer_id == customer_id)
            .order_by(col(WishlistRow.added_at).desc())
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, customer_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistRow | None:
        stmt = select(WishlistRow).where(
            WishlistRow.customer_id == customer_id,
            WishlistRow.product_id == product_id,
        )
        return session.exec(stmt).first()

    def count(self, session: Session, customer_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(WishlistRow)
            .where(WishlistRow.customer_id == customer_id)
        )
        return int(session.exec(stmt).one() or 0)

    def add(self, session: Session, row: WishlistRow) -> WishlistRow:
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def delete(self, session: Session, row: WishlistRow) -> None:
        session.delete(row)
        session.commit()

    def clear(self, session: Session, customer_id: uuid.UUID) -> None:
        session.exec(delete(WishlistRow).where(WishlistRow.customer_id == customer_id))
        session.commit()
