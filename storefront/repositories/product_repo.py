# storefront/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, or_, select

from storefront.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if category and category != "all":
            stmt = stmt.where(Product.category == category)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.description).ilike(pattern),
                    col(Product.brand).ilike(pattern),
                )
            )
        stmt = stmt.order_by(col(Product.created_at).desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_low_stock(
        self,
        session: Session,
        threshold: int = 10,
        limit: int = 50,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.stock <= threshold)
            .order_by(col(Product.stock).asc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
