# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import get_current_user, require_customer
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartCount,
    CartItemCreate,
    CartItemUpdate,
    CartRowRead,
    CartView,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartView)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Get the caller's cart.

    Auth:
      - Optional. Guests (and admins) get an empty cart; the guest
        cart lives on the client.
    """
    if current_user is None or current_user.role != "customer":
        return CartView(items=[], total=0, item_count=0)
    return service.get_cart(session, current_user.id)


@router.get("/count", response_model=CartCount)
def get_cart_count(
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Sum of quantities in the caller's cart (0 for guests).
    """
    if current_user is None or current_user.role != "customer":
        return CartCount(count=0)
    return CartCount(count=service.get_count(session, current_user.id))


@router.post("", response_model=CartRowRead, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Add a product to the cart, incrementing the existing row if the
    product is already there.

    Returns the created/updated row.
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.put("/{cart_id}", response_model=CartRowRead)
def update_cart_item(
    cart_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Overwrite the quantity of a cart row (quantity >= 1).
    """
    return service.update_quantity(session, current_user.id, cart_id, payload)


@router.delete("/{cart_id}")
def remove_cart_item(
    cart_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
) -> dict[str, str]:
    """
    Remove a row from the cart.
    """
    service.remove_item(session, current_user.id, cart_id)
    return {"message": "Item removed from cart"}


@router.delete("")
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
) -> dict[str, str]:
    """
    Clear the entire cart.
    """
    service.clear_cart(session, current_user.id)
    return {"message": "Cart cleared"}
