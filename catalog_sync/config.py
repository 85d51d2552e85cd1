"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Core components receive SyncConfig, never Settings

Design Decisions:
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_sync.core.message_strings import resolve_locale
from catalog_sync.core.sync_config import SyncConfig


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://catalog:catalog@db:5432/catalog"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Commerce platform (WooCommerce REST API)
    commerce_base_url: str = "http://localhost:8080/wp-json/wc/v3"
    commerce_consumer_key: str = "ck_placeholder"
    commerce_consumer_secret: str = "cs_placeholder"

    # Rights service (Cantook)
    rights_base_url: str = "http://localhost:8081/api/v1"
    rights_api_key: str = "rights-placeholder"

    http_timeout_seconds: float = 30.0

    # Catalog and sales
    exchange_rate: float = 6.96
    sale_state: str = "test"
    native_currency: str = "BOB"
    download_window_minutes: int = 5
    locale: str = "es"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def sync_config(self) -> SyncConfig:
        return SyncConfig(
            exchange_rate=self.exchange_rate,
            sale_state=self.sale_state,
            native_currency=self.native_currency,
            download_window=timedelta(minutes=self.download_window_minutes),
            locale=resolve_locale(self.locale),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
