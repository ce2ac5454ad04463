"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - storage_backend selects the repository implementation at request time:
      "database" (SQLAlchemy) or "memory" (process-local maps)
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://investestate:investestate@db:5432/investestate"
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

    storage_backend: Literal["database", "memory"] = "database"
    seed_catalog: bool = True

    # Sessions
    session_cookie_name: str = "investestate_session"
    session_ttl_hours: int = 24
    session_cookie_secure: bool = False
    # Short-lived cookie tying create-profile to the client that entered the code
    signup_cookie_name: str = "investestate_signup"

    # OTP
    otp_length: int = 6
    otp_ttl_seconds: int = 300
    otp_max_attempts: int = 5
    # Development only: writes issued codes to the log
    otp_log_codes: bool = False

    # Payments
    stripe_secret_key: str | None = None
    payment_currency: str = "inr"

    # Wizard drafts
    draft_ttl_days: int = 30

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
