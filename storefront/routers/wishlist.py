# storefront/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import get_current_user, require_customer
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import (
    WishlistCount,
    WishlistItemCreate,
    WishlistRowRead,
    WishlistView,
)
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

service = WishlistService(WishlistRepository(), ProductRepository())


@router.get("/count", response_model=WishlistCount)
def get_wishlist_count(
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Number of saved products (0 for guests and admins).
    """
    if current_user is None or current_user.role != "customer":
        return WishlistCount(count=0)
    return WishlistCount(count=service.get_count(session, current_user.id))


@router.get("", response_model=WishlistView)
def get_my_wishlist(
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    if current_user is None or current_user.role != "customer":
        return WishlistView(items=[], count=0)
    return service.get_wishlist(session, current_user.id)


@router.post("", response_model=WishlistRowRead, status_code=status.HTTP_201_CREATED)
def add_to_wishlist(
    payload: WishlistItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    return service.add(session, current_user.id, payload)


@router.delete("/{product_id}")
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
) -> dict[str, str]:
    service.remove(session, current_user.id, product_id)
    return {"message": "Item removed from wishlist"}


@router.delete("")
def clear_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
) -> dict[str, str]:
    service.clear(session, current_user.id)
    return {"message": "Wishlist cleared"}
