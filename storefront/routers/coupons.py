# storefront/routers/coupons.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.coupon_repo import CouponRepository
from storefront.schemas.coupon import (
    CouponCreate,
    CouponRead,
    CouponUpdate,
    CouponValidateRequest,
    CouponValidation,
)
from storefront.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["Coupons"])

service = CouponService(CouponRepository())


# -------- Public endpoints --------


@router.get("/active", response_model=list[CouponRead])
def list_active_coupons(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 20,
):
    """
    Codes that are active and not yet expired, newest first.
    """
    return service.list_active(session, skip, limit)


@router.post("/validate", response_model=CouponValidation)
def validate_coupon(
    payload: CouponValidateRequest,
    session: Session = Depends(get_session),
):
    """
    Check a code before checkout. 400 with the reason when it cannot be used.
    """
    return service.validate(session, payload.code)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[CouponRead],
    dependencies=[Depends(require_admin)],
)
def list_coupons(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    return service.list_all(session, skip, limit)


@router.post(
    "",
    response_model=CouponRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_coupon(
    payload: CouponCreate,
    session: Session = Depends(get_session),
):
    return service.create(session, payload)


@router.put(
    "/{coupon_id}",
    response_model=CouponRead,
    dependencies=[Depends(require_admin)],
)
def update_coupon(
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    session: Session = Depends(get_session),
):
    return service.update(session, coupon_id, payload)


@router.put(
    "/{coupon_id}/toggle",
    response_model=CouponRead,
    dependencies=[Depends(require_admin)],
)
def toggle_coupon(
    coupon_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Flip is_active.
    """
    return service.toggle(session, coupon_id)


@router.delete("/{coupon_id}", dependencies=[Depends(require_admin)])
def delete_coupon(
    coupon_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    service.delete(session, coupon_id)
    return {"message": "Coupon deleted"}
