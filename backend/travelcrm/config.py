"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets and deployment specifics come from environment variables or .env
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Defaults for every setting: works out-of-the-box against local SQLite
    - Default admin credentials mirror the first-run account; override in production
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./travelcrm.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql://", 1)
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_echo: bool = False

    # Sessions
    session_cookie_name: str = "travelcrm_session"
    session_ttl_hours: int = 24
    session_cookie_secure: bool = False
    session_cookie_samesite: Literal["lax", "strict", "none"] = "lax"

    # Credentials
    bcrypt_rounds: int = 10

    # Bootstrap admin
    default_admin_username: str = "admin"
    default_admin_password: str = "admin123"
    default_admin_full_name: str = "System Administrator"
    default_admin_email: str = "admin@travelcrm.com"

    # Listing
    client_list_limit: int = 100
    audit_log_limit: int = 100

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.session_ttl_hours)


@lru_cache
def get_settings() -> Settings:
    return Settings()
