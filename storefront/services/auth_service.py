# storefront/services/auth_service.py
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.auth import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from storefront.core.config import Settings
from storefront.core.email_client import send_otp_email
from storefront.models.otp import OtpCode
from storefront.models.user import User
from storefront.repositories.otp_repo import OtpRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.auth import (
    AccessTokenResponse,
    AdminLoginRequest,
    AuthResponse,
    SendOtpResponse,
    VerifyOtpRequest,
)
from storefront.schemas.user import UserRead

logger = logging.getLogger(__name__)


def generate_otp(length: int = 6) -> str:
    """Random numeric code with exactly `length` digits (no leading zero)."""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def _as_utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode(), expected.encode())


def _default_name_from_email(email: str) -> str:
    if "@" in email:
        return email.split("@", 1)[0]
    return email


class AuthService:
    """
    OTP e-mail login and token issuing.

    Verification state machine (per e-mail, one pending code):

      no code            -> 400, ask for a new one
      expired            -> code deleted, 400
      attempts exhausted -> code deleted, 400
      wrong code         -> attempts += 1, 400
      right code         -> code deleted, account found or created, tokens
    """

    def __init__(
        self,
        user_repo: UserRepository,
        otp_repo: OtpRepository,
        settings: Settings,
    ):
        self.user_repo = user_repo
        self.otp_repo = otp_repo
        self.settings = settings

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            user=UserRead.model_validate(user, from_attributes=True),
            access_token=create_access_token(user),
            refresh_token=create_refresh_token(user),
        )

    # ----- OTP -----

    def send_otp(self, session: Session, email: str) -> SendOtpResponse:
        """
        Issue a fresh code for `email`, replacing any pending one, and
        deliver it by e-mail.
        """
        purged = self.otp_repo.delete_expired(session)
        if purged:
            logger.info("Purged %d expired OTP codes", purged)

        existing_user = self.user_repo.get_by_email(session, email)
        code = OtpCode(
            email=email,
            otp=generate_otp(self.settings.OTP_LENGTH),
            expires_at=datetime.now(timezone.utc)
            + timedelta(minutes=self.settings.OTP_EXPIRE_MINUTES),
            attempts=0,
            purpose="login" if existing_user else "signup",
        )
        code = self.otp_repo.replace(session, code)

        try:
            send_otp_email(email, code.otp, self.settings.OTP_EXPIRE_MINUTES)
        except Exception as exc:
            logger.error("Error sending OTP to %s: %s", email, exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to send OTP. Please try again.",
            )

        return SendOtpResponse(
            email=email,
            expires_in_minutes=self.settings.OTP_EXPIRE_MINUTES,
        )

    def verify_otp(self, session: Session, payload: VerifyOtpRequest) -> AuthResponse:
        email = str(payload.email)
        code = self.otp_repo.get_by_email(session, email)
        if code is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="OTP not found or expired. Please request a new OTP.",
            )

        if datetime.now(timezone.utc) > _as_utc(code.expires_at):
            self.otp_repo.delete(session, code)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="OTP has expired. Please request a new OTP.",
            )

        if code.attempts >= self.settings.OTP_MAX_ATTEMPTS:
            self.otp_repo.delete(session, code)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Too many failed attempts. Please request a new OTP.",
            )

        if not _matches(payload.otp, code.otp):
            code.attempts += 1
            self.otp_repo.update(session, code)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid OTP",
            )

        self.otp_repo.delete(session, code)

        user = self.user_repo.get_by_email(session, email)
        if user is None:
            user = self.user_repo.save(
                session,
                User(
                    email=email,
                    name=payload.name or _default_name_from_email(email),
                    role="customer",
                ),
            )
            logger.info("Created customer account for %s", email)

        return self._auth_response(user)

    # ----- Tokens -----

    def refresh(self, session: Session, refresh_token: str) -> AccessTokenResponse:
        claims = decode_token(refresh_token)
        if claims.get("type") != REFRESH_TOKEN:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid refresh token",
            )

        try:
            user_id = uuid.UUID(claims.get("sub", ""))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid refresh token",
            )

        user = self.user_repo.get_by_id(session, user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found",
            )
        return AccessTokenResponse(access_token=create_access_token(user))

    # ----- Admin console -----

    def admin_login(self, session: Session, payload: AdminLoginRequest) -> AuthResponse:
        """
        Password login for the admin console, checked against the
        configured ADMIN_EMAIL / ADMIN_PASSWORD. The matching account is
        created (or promoted) with role 'admin'.
        """
        admin_email = self.settings.ADMIN_EMAIL
        admin_password = self.settings.ADMIN_PASSWORD
        if not (
            admin_email
            and admin_password
            and _matches(str(payload.email), admin_email)
            and _matches(payload.password, admin_password)
        ):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid admin credentials",
            )

        user = self.user_repo.get_by_email(session, admin_email)
        if user is None:
            user = self.user_repo.save(
                session, User(email=admin_email, name="Admin", role="admin")
            )
        elif user.role != "admin":
            user.role = "admin"
            user = self.user_repo.save(session, user)

        return self._auth_response(user)
