# storefront/services/user_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import UserRoleUpdate, UserSummary, UserUpdate


class UserService:
    """
    Account management.

    Accounts are created by OTP verification (customers) or admin login,
    never through this service; here they are only renamed, re-roled,
    listed or removed.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def update_me(self, session: Session, current_user: User, payload: UserUpdate) -> User:
        # e-mail is the login identity and stays fixed
        current_user.name = payload.name
        return self.repo.save(session, current_user)

    # ----- Admin -----

    def list_users(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        role: str | None = None,
        search: str | None = None,
    ) -> list[User]:
        return self.repo.list_users(session, skip=skip, limit=limit, role=role, search=search)

    def summary(self, session: Session) -> UserSummary:
        counts = self.repo.count_by_role(session)
        customers = counts.get("customer", 0)
        admins = counts.get("admin", 0)
        return UserSummary(total=customers + admins, customers=customers, admins=admins)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
        acting_admin: User,
    ) -> User:
        """
        Promote / demote an account. An admin cannot demote themselves.
        """
        if user_id == acting_admin.id and payload.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot change your own role",
            )
        user = self.get_user(session, user_id)
        user.role = payload.role
        return self.repo.save(session, user)

    def delete_user(self, session: Session, user_id: uuid.UUID, acting_admin: User) -> None:
        if user_id == acting_admin.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot delete your own account",
            )
        self.repo.delete(session, self.get_user(session, user_id))
