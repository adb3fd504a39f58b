# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Supabase Postgres connection string)
      - JWT_SECRET (signing secret for access / refresh tokens)

    Optional:
      - SUPABASE_URL + SUPABASE_SERVICE_ROLE_KEY (product image uploads)
      - SMTP_* (OTP e-mails)
      - ADMIN_EMAIL + ADMIN_PASSWORD (admin console login)
    """

    PROJECT_NAME: str = "Lalitha Mega Mall API"
    API_V1_STR: str = "/api"

    # DB config
    DATABASE_URL: str

    # JWT issuing / verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    # OTP login
    OTP_LENGTH: int = 6
    OTP_EXPIRE_MINUTES: int = 60 * 24
    OTP_MAX_ATTEMPTS: int = 3

    # Admin console credentials; admin login is disabled when unset
    ADMIN_EMAIL: str | None = None
    ADMIN_PASSWORD: str | None = None

    # Supabase Storage (service role key bypasses RLS, backend only)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_STORAGE_BUCKET: str = "product-images"

    # SMTP
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Lalitha Mega Mall"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False

    # Extra CORS origin for the deployed storefront
    FRONTEND_URL: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
