# storefront/routers/auth.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.otp_repo import OtpRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.auth import (
    AccessTokenResponse,
    AdminLoginRequest,
    AuthResponse,
    RefreshTokenRequest,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpRequest,
)
from storefront.schemas.user import UserRead, UserUpdate
from storefront.services.auth_service import AuthService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

user_repo = UserRepository()
service = AuthService(user_repo, OtpRepository(), get_settings())
user_service = UserService(user_repo)


# -------- Public endpoints --------


@router.post("/send-otp", response_model=SendOtpResponse)
def send_otp(
    payload: SendOtpRequest,
    session: Session = Depends(get_session),
):
    """
    E-mail a one-time password. Any earlier pending code for the same
    address stops working.
    """
    return service.send_otp(session, str(payload.email))


@router.post("/verify-otp", response_model=AuthResponse)
def verify_otp(
    payload: VerifyOtpRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange a valid OTP for access + refresh tokens.

    First-time e-mails get a customer account (name from payload or
    the e-mail local part).
    """
    return service.verify_otp(session, payload)


@router.post("/refresh-token", response_model=AccessTokenResponse)
def refresh_token(
    payload: RefreshTokenRequest,
    session: Session = Depends(get_session),
):
    return service.refresh(session, payload.refresh_token)


@router.post("/admin-login", response_model=AuthResponse)
def admin_login(
    payload: AdminLoginRequest,
    session: Session = Depends(get_session),
):
    """
    Admin console login (e-mail + password from settings).
    """
    return service.admin_login(session, payload)


# -------- Authenticated endpoints --------


@router.post("/logout")
def logout(current_user: User = Depends(require_auth)) -> dict[str, str]:
    """
    Tokens are stateless; the client drops them.
    """
    return {"message": "Logout successful"}


@router.get("/profile", response_model=UserRead)
def read_profile(current_user: User = Depends(require_auth)):
    return current_user


@router.put("/profile", response_model=UserRead)
def update_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's display name.
    """
    return user_service.update_me(session, current_user, payload)
