# storefront/services/coupon_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.coupon import Coupon
from storefront.repositories.coupon_repo import CouponRepository
from storefront.schemas.coupon import (
    CouponCreate,
    CouponRead,
    CouponUpdate,
    CouponValidation,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # naive values (sqlite, or an admin form without offset) are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class CouponService:
    """
    Coupon lookup for shoppers and coupon management for admins.

    A code is redeemable while it is active, not past its expiry date
    and under its usage cap. Redemption happens inside checkout; the
    usage bump is staged so it commits with the order.
    """

    def __init__(self, repo: CouponRepository):
        self.repo = repo

    def _get(self, session: Session, coupon_id: uuid.UUID) -> Coupon:
        coupon = self.repo.get_by_id(session, coupon_id)
        if coupon is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Coupon not found",
            )
        return coupon

    # ----- Shoppers -----

    def list_active(self, session: Session, skip: int = 0, limit: int = 20) -> list[Coupon]:
        return self.repo.list_active(session, datetime.now(timezone.utc), skip, limit)

    def check(self, session: Session, code: str | None) -> Coupon:
        """
        Return the coupon for `code` if it can be redeemed right now.

        Raises:
            HTTPException(400) naming the first rule that fails.
        """
        if not code:
            raise _bad_request("Coupon code is required")

        coupon = self.repo.get_by_code(session, code)
        if coupon is None:
            raise _bad_request("Coupon not found")
        if not coupon.is_active:
            raise _bad_request("Coupon is inactive")
        if _as_utc(coupon.expiry_date) < datetime.now(timezone.utc):
            raise _bad_request("Coupon has expired")
        if coupon.current_uses >= coupon.max_uses:
            raise _bad_request("Coupon usage limit reached")
        return coupon

    def validate(self, session: Session, code: str | None) -> CouponValidation:
        coupon = self.check(session, code)
        return CouponValidation(
            valid=True,
            message="Coupon is valid",
            coupon=CouponRead.model_validate(coupon, from_attributes=True),
        )

    def redeem(self, session: Session, code: str) -> Coupon:
        """Check `code` and stage one more use. The caller commits."""
        coupon = self.check(session, code)
        coupon.current_uses += 1
        return self.repo.stage(session, coupon)

    # ----- Admin -----

    def list_all(self, session: Session, skip: int = 0, limit: int = 50) -> list[Coupon]:
        return self.repo.list_all(session, skip, limit)

    def create(self, session: Session, payload: CouponCreate) -> Coupon:
        if _as_utc(payload.expiry_date) <= datetime.now(timezone.utc):
            raise _bad_request("Expiry date must be in the future")
        if self.repo.get_by_code(session, payload.code) is not None:
            raise _bad_request("Coupon code already exists")

        coupon = self.repo.save(session, Coupon(**payload.model_dump()))
        logger.info("Coupon %s created (%d%% off)", coupon.code, coupon.discount_percent)
        return coupon

    def update(self, session: Session, coupon_id: uuid.UUID, payload: CouponUpdate) -> Coupon:
        coupon = self._get(session, coupon_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(coupon, field, value)
        return self.repo.save(session, coupon)

    def toggle(self, session: Session, coupon_id: uuid.UUID) -> Coupon:
        coupon = self._get(session, coupon_id)
        coupon.is_active = not coupon.is_active
        return self.repo.save(session, coupon)

    def delete(self, session: Session, coupon_id: uuid.UUID) -> None:
        self.repo.delete(session, self._get(session, coupon_id))
