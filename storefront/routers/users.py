# storefront/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import Role, UserRead, UserRoleUpdate, UserSummary
from storefront.services.user_service import UserService

# Every route here is admin-only
router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_admin)],
)

service = UserService(UserRepository())


@router.get("", response_model=list[UserRead])
def list_users(
    session: Session = Depends(get_session),
    role: Role | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """
    Accounts, newest first.

    - `role` narrows to customers or admins.
    - `search` matches e-mail or name.
    """
    return service.list_users(session, skip=skip, limit=limit, role=role, search=search)


@router.get("/summary", response_model=UserSummary)
def users_summary(session: Session = Depends(get_session)):
    return service.summary(session)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: uuid.UUID, session: Session = Depends(get_session)):
    return service.get_user(session, user_id)


@router.patch("/{user_id}/role", response_model=UserRead)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return service.update_role(session, user_id, payload, admin)


@router.delete("/{user_id}")
def delete_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> dict[str, str]:
    service.delete_user(session, user_id, admin)
    return {"message": "User deleted"}
