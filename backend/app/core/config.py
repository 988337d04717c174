"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Landlord Ledger"
    debug: bool = False
    api_prefix: str = "/api"
    log_level: str = "INFO"
    allowed_origins: str = "*"

    # Database
    database_url: str
    create_tables_on_startup: bool = False
    seed_sample_data: bool = False

    # RentCast property search
    rentcast_api_key: Optional[str] = None
    rentcast_base_url: str = "https://api.rentcast.io/v1"
    rentcast_result_limit: int = 50
    external_timeout_seconds: float = 10.0

    # Public-record owner lookup
    owner_lookup_enabled: bool = True
    owner_lookup_timeout_seconds: float = 20.0

    # Requester identity
    trust_forwarded_for: bool = False

    # Firebase Auth (optional, authenticated voter identity)
    firebase_project_id: Optional[str] = None
    google_application_credentials: Optional[str] = None

    @property
    def rentcast_enabled(self) -> bool:
        """RentCast is only queried when an API key is configured."""
        return bool(self.rentcast_api_key)

    @property
    def firebase_enabled(self) -> bool:
        return bool(self.firebase_project_id or self.google_application_credentials)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
