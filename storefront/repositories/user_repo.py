# storefront/repositories/user_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, col, select

from storefront.models.user import User


class UserRepository:
    """
    Accounts table access. Callers own validation and HTTP mapping.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        # e-mail is the OTP login identity, unique per account
        return session.exec(select(User).where(User.email == email)).first()

    def list_users(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        role: str | None = None,
        search: str | None = None,
    ) -> list[User]:
        """
        Newest accounts first, optionally narrowed to one role and/or an
        e-mail / name substring.
        """
        stmt = select(User)
        if role:
            stmt = stmt.where(User.role == role)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                col(User.email).ilike(pattern) | col(User.name).ilike(pattern)
            )
        stmt = stmt.order_by(col(User.created_at).desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count_by_role(self, session: Session) -> dict[str, int]:
        stmt = select(User.role, func.count()).group_by(User.role)
        return {role: count for role, count in session.exec(stmt).all()}

    def save(self, session: Session, user: User) -> User:
        """Insert or update, then reload server-side defaults."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        session.delete(user)
        session.commit()
