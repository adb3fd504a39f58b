# storefront/repositories/coupon_repo.py
import uuid
from datetime import datetime

from sqlalchemy import func
from sqlmodel import Session, col, select

from storefront.models.coupon import Coupon


class CouponRepository:
    """
    Coupons table access. Validity rules live in CouponService.
    """

    def get_by_id(self, session: Session, coupon_id: uuid.UUID) -> Coupon | None:
        return session.get(Coupon, coupon_id)

    def get_by_code(self, session: Session, code: str) -> Coupon | None:
        return session.exec(select(Coupon).where(Coupon.code == code.upper())).first()

    def list_active(
        self, session: Session, now: datetime, skip: int = 0, limit: int = 20
    ) -> list[Coupon]:
        stmt = (
            select(Coupon)
            .where(Coupon.is_active == True, Coupon.expiry_date >= now)  # noqa: E712
            .order_by(col(Coupon.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_all(self, session: Session, skip: int = 0, limit: int = 50) -> list[Coupon]:
        stmt = select(Coupon).order_by(col(Coupon.created_at).desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count(self, session: Session, active_at: datetime | None = None) -> int:
        stmt = select(func.count()).select_from(Coupon)
        if active_at is not None:
            stmt = stmt.where(Coupon.is_active == True, Coupon.expiry_date >= active_at)  # noqa: E712
        return int(session.exec(stmt).one() or 0)

    def save(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    def stage(self, session: Session, coupon: Coupon) -> Coupon:
        # checkout commits the usage bump together with the order
        session.add(coupon)
        session.flush()
        return coupon

    def delete(self, session: Session, coupon: Coupon) -> None:
        session.delete(coupon)
        session.commit()
