# storefront/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.cart import CartRow
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartLineRead,
    CartView,
    ProductRef,
)


def discounted_price(product: Product) -> float:
    """
    Effective unit price: list price minus discount_percent, if any.
    """
    if product.discount_percent and product.discount_percent > 0:
        return product.price * (1 - product.discount_percent / 100)
    return product.price


class CartService:
    """
    Business logic for the server-side cart.

    Responsibilities:
      - only customers reach these operations (router dependency)
      - upsert-by-increment on add
      - quantity overwrite / removal / clear, scoped to the caller
      - totals re-join live products and apply discount_percent
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_own_row(
        self,
        session: Session,
        customer_id: uuid.UUID,
        row_id: uuid.UUID,
    ) -> CartRow:
        row = self.cart_repo.get_by_id(session, row_id)
        if not row or row.customer_id != customer_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart item not found",
            )
        return row

    # ---- reads ----

    def get_cart(
        self,
        session: Session,
        customer_id: uuid.UUID,
    ) -> CartView:
        """
        Return full cart view:
          - lines with product reference, unit_price, line_total
          - total (discounted, rounded to 2 decimals)
          - itemCount (sum of quantities, not rows)
        """
        lines: list[CartLineRead] = []
        total = 0.0
        item_count = 0

        for row, product in self.cart_repo.list_with_products(session, customer_id):
            unit_price = discounted_price(product)
            line_total = unit_price * row.quantity
            total += line_total
            item_count += row.quantity

            lines.append(
                CartLineRead(
                    id=row.id,
                    customer_id=row.customer_id,
                    product_id=row.product_id,
                    quantity=row.quantity,
                    added_at=row.added_at,
                    product=ProductRef(
                        id=product.id,
                        name=product.name,
                        price=product.price,
                        discount_percent=product.discount_percent,
                        image_url=product.image_url,
                        category=product.category,
                        stock=product.stock,
                    ),
                    unit_price=round(unit_price, 2),
                    line_total=round(line_total, 2),
                )
            )

        return CartView(items=lines, total=round(total, 2), item_count=item_count)

    def get_total(self, session: Session, customer_id: uuid.UUID) -> float:
        return self.get_cart(session, customer_id).total

    def get_count(self, session: Session, customer_id: uuid.UUID) -> int:
        return self.cart_repo.count_quantity(session, customer_id)

    # ---- writes ----

    def add_to_cart(
        self,
        session: Session,
        customer_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartRow:
        """
        Add a product to the cart, or increase the quantity of the
        existing row for that product.

        Rules:
          - productId is required (400)
          - product must exist (404)
          - quantity defaults to 1 and must be >= 1 (400)
        """
        if payload.product_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product ID is required",
            )

        quantity = 1 if payload.quantity is None else payload.quantity
        if quantity < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Quantity must be at least 1",
            )

        if not self.product_repo.get_by_id(session, payload.product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        return self.cart_repo.add_or_increment(
            session,
            customer_id=customer_id,
            product_id=payload.product_id,
            quantity=quantity,
        )

    def update_quantity(
        self,
        session: Session,
        customer_id: uuid.UUID,
        row_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartRow:
        """
        Overwrite the quantity of a cart row.

        Zero / negative quantities are rejected here; callers translate
        them into a removal before calling.
        """
        if payload.quantity is None or payload.quantity < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Valid quantity is required",
            )

        row = self._get_own_row(session, customer_id, row_id)
        row.quantity = payload.quantity
        return self.cart_repo.update(session, row)

    def remove_item(
        self,
        session: Session,
        customer_id: uuid.UUID,
        row_id: uuid.UUID,
    ) -> None:
        row = self._get_own_row(session, customer_id, row_id)
        self.cart_repo.delete(session, row)

    def clear_cart(
        self,
        session: Session,
        customer_id: uuid.UUID,
    ) -> None:
        self.cart_repo.clear_customer_cart(session, customer_id)
