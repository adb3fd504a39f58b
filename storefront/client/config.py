# storefront/client/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Settings for the cart client, read from STOREFRONT_* env vars.

      - STOREFRONT_API_BASE_URL : REST API root, including the /api prefix
      - STOREFRONT_STORAGE_PATH : JSON file standing in for local storage
      - STOREFRONT_REQUEST_TIMEOUT : seconds per HTTP request
    """

    API_BASE_URL: str = "http://localhost:5000/api"
    STORAGE_PATH: str = "~/.storefront/local_storage.json"
    REQUEST_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
