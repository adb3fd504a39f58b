# storefront/services/wishlist_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.wishlist import WishlistRow
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.cart import ProductRef
from storefront.schemas.wishlist import WishlistItemCreate, WishlistLineRead, WishlistView


class WishlistService:
    """
    Per-customer list of saved products. Adding a product twice is an
    error rather than a no-op; removing an absent one is a no-op.
    """

    def __init__(self, wishlist_repo: WishlistRepository, product_repo: ProductRepository):
        self.wishlist_repo = wishlist_repo
        self.product_repo = product_repo

    def get_wishlist(self, session: Session, customer_id: uuid.UUID) -> WishlistView:
        items = [
            WishlistLineRead(
                **row.model_dump(),
                product=ProductRef.model_validate(product, from_attributes=True),
            )
            for row, product in self.wishlist_repo.list_with_products(session, customer_id)
        ]
        return WishlistView(items=items, count=len(items))

    def get_count(self, session: Session, customer_id: uuid.UUID) -> int:
        return self.wishlist_repo.count(session, customer_id)

    def add(
        self, session: Session, customer_id: uuid.UUID, payload: WishlistItemCreate
    ) -> WishlistRow:
        if payload.product_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product ID is required",
            )
        if self.product_repo.get_by_id(session, payload.product_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if self.wishlist_repo.get_item(session, customer_id, payload.product_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product already in wishlist",
            )

        return self.wishlist_repo.add(
            session, WishlistRow(customer_id=customer_id, product_id=payload.product_id)
        )

    def remove(self, session: Session, customer_id: uuid.UUID, product_id: uuid.UUID) -> None:
        row = self.wishlist_repo.get_item(session, customer_id, product_id)
        if row is not None:
            self.wishlist_repo.delete(session, row)

    def clear(self, session: Session, customer_id: uuid.UUID) -> None:
        self.wishlist_repo.clear(session, customer_id)
