"""
Startup configuration check.

Runs before the app is built. Every problem found is reported at once, then
the process exits with code 1 so a misconfigured deployment never serves
traffic.
"""

import os
import sys
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeploymentSettings(BaseSettings):
    """Strict view of the environment: unknown keys in .env are errors."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
    )

    # Store
    database_url: str
    create_tables_on_startup: bool = False
    seed_sample_data: bool = False

    # App
    app_name: str = "Landlord Ledger"
    debug: bool = False
    api_prefix: str = "/api"
    log_level: str = "INFO"
    allowed_origins: str = "*"

    # Property search
    rentcast_api_key: Optional[str] = None
    rentcast_base_url: str = "https://api.rentcast.io/v1"
    rentcast_result_limit: int = 50
    external_timeout_seconds: float = 10.0

    # Owner lookup
    owner_lookup_enabled: bool = True
    owner_lookup_timeout_seconds: float = 20.0

    # Requester identity
    trust_forwarded_for: bool = False
    firebase_project_id: Optional[str] = None
    google_application_credentials: Optional[str] = None


def find_problems(settings: DeploymentSettings) -> list[str]:
    """Fatal misconfigurations, empty when the deployment may start."""
    problems = []

    origins = [o.strip() for o in settings.allowed_origins.split(",")]
    if "*" in origins and not settings.debug:
        problems.append("Wildcard CORS origin (*) requires DEBUG=true; set ALLOWED_ORIGINS to explicit domains")

    url = settings.database_url
    if url.startswith("sqlite"):
        if not settings.debug:
            problems.append("SQLite DATABASE_URL requires DEBUG=true")
    elif not url.startswith("postgresql"):
        problems.append("DATABASE_URL must be postgresql:// or postgresql+asyncpg://")

    if settings.external_timeout_seconds <= 0:
        problems.append("EXTERNAL_TIMEOUT_SECONDS must be positive")
    if settings.owner_lookup_timeout_seconds <= 0:
        problems.append("OWNER_LOOKUP_TIMEOUT_SECONDS must be positive")
    if settings.rentcast_result_limit < 1:
        problems.append("RENTCAST_RESULT_LIMIT must be at least 1")

    creds = settings.google_application_credentials
    if creds and not os.path.exists(creds):
        problems.append(f"Firebase credentials file not found: {creds}")

    return problems


def validate_environment() -> DeploymentSettings:
    """Validate the environment or exit(1)."""
    try:
        settings = DeploymentSettings()
    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   • {field}: {error['msg']}", file=sys.stderr)
        print("Check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    problems = find_problems(settings)
    if problems:
        for problem in problems:
            print(f"❌ FATAL: {problem}", file=sys.stderr)
        sys.exit(1)

    if not settings.rentcast_api_key:
        print("⚠️  RENTCAST_API_KEY not set - landlord search uses local data only")

    print("✅ Environment validation passed")
    print(f"   App: {settings.app_name} (debug={settings.debug})")
    print(f"   Store: {settings.database_url.split('://')[0]}")
    print(f"   RentCast: {'enabled' if settings.rentcast_api_key else 'disabled'}")
    print(f"   Owner lookup: {'enabled' if settings.owner_lookup_enabled else 'disabled'}")
    print(f"   CORS Origins: {settings.allowed_origins}")
    return settings


if __name__ == "__main__":
    validate_environment()
