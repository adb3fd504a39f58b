# storefront/repositories/otp_repo.py
from datetime import datetime, timezone

from sqlmodel import Session, col, delete, select

from storefront.models.otp import OtpCode


class OtpRepository:
    """
    Data access layer for pending one-time passwords.
    """

    def get_by_email(self, session: Session, email: str) -> OtpCode | None:
        stmt = select(OtpCode).where(OtpCode.email == email)
        return session.exec(stmt).first()

    def replace(self, session: Session, code: OtpCode) -> OtpCode:
        """
        Drop any previous code for the same e-mail and insert the new one.
        """
        session.exec(delete(OtpCode).where(OtpCode.email == code.email))
        session.add(code)
        session.commit()
        session.refresh(code)
        return code

    def update(self, session: Session, code: OtpCode) -> OtpCode:
        session.add(code)
        session.commit()
        session.refresh(code)
        return code

    def delete(self, session: Session, code: OtpCode) -> None:
        session.delete(code)
        session.commit()

    def delete_expired(self, session: Session, now: datetime | None = None) -> int:
        """Purge expired codes; returns how many rows were removed."""
        now = now or datetime.now(timezone.utc)
        expired = session.exec(
            select(OtpCode).where(col(OtpCode.expires_at) < now)
        ).all()
        for code in expired:
            session.delete(code)
        session.commit()
        return len(expired)
