from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Storefront API
    API_BASE_URL: str = "https://lelehaat.com/api"
    API_TIMEOUT_SECONDS: float = 10.0

    # On-device key-value storage
    LOCAL_STORE_URL: str = "sqlite+aiosqlite:///./.local_store.sqlite3"
    CART_STORAGE_KEY: str = "@app_cart"
    WISHLIST_STORAGE_KEY: str = "@app_wishlist"

    # Checkout
    SHIPPING_COST: Decimal = Decimal("0")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("LOCAL_STORE_URL")
    @classmethod
    def assemble_store_url(cls, v: str) -> str:
        # Plain sqlite URLs need the async driver
        if v.startswith("sqlite:///"):
            return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
