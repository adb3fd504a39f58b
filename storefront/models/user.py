# storefront/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent account for the storefront.

    Identity:
      - created on first successful OTP verification (or admin login)
      - id is the "sub" claim of every token we issue

    Role:
      - "customer" | "admin"
      - "guest" is represented by the absence of a token.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login e-mail (OTP is delivered here)",
    )

    name: str = Field(
        max_length=100,
        description="Display name; e-mail local part by default",
    )

    role: str = Field(
        default="customer",
        index=True,
        description="Application role: customer | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
