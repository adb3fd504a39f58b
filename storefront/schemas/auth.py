# storefront/schemas/auth.py
from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.user import UserRead


class SendOtpRequest(SQLModel):
    email: EmailStr


class SendOtpResponse(SQLModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    expires_in_minutes: int = Field(alias="expiresInMinutes")


class VerifyOtpRequest(SQLModel):
    """
    Payload for completing an OTP login.

    `name` is only used when the e-mail has no account yet.
    """

    email: EmailStr
    otp: str
    name: str | None = Field(default=None, max_length=100)

    @field_validator("otp")
    @classmethod
    def strip_otp(cls, v: str) -> str:
        return v.strip()

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class AuthResponse(SQLModel):
    """
    Successful login: profile plus both tokens.
    """

    model_config = ConfigDict(populate_by_name=True)

    user: UserRead
    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class RefreshTokenRequest(SQLModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken")


class AccessTokenResponse(SQLModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")


class AdminLoginRequest(SQLModel):
    email: str
    password: str
