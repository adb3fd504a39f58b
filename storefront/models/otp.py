# storefront/models/otp.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class OtpCode(SQLModel, table=True):
    """
    Pending one-time password for an e-mail address.

    At most one row per e-mail: requesting a new code replaces the old one.
    """

    __tablename__ = "otps"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    otp: str

    expires_at: datetime

    attempts: int = Field(default=0)

    # login | signup
    purpose: str = Field(default="signup")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
