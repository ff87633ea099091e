"""Application configuration using Pydantic Settings."""

from datetime import date
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Jelloverse API")
    app_version: str = Field(default="0.1.0")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    forwarded_allow_ips: str = Field(
        default="127.0.0.1",
        description="Proxies trusted to set X-Forwarded-For (comma-separated, * for any)",
    )

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/jelloverse",
        description="PostgreSQL connection URL with asyncpg driver",
    )
    db_pool_size: int = Field(default=5, description="Persistent connections per worker")
    db_max_overflow: int = Field(default=10)
    db_pool_recycle_seconds: int = Field(
        default=1800,
        description="Recycle pooled connections before the pooler drops them",
    )

    # Authentication (external provider issues ES256 tokens, HS256 for tests)
    auth_jwks_url: str = Field(
        default="",
        description="JWKS endpoint of the auth provider (e.g. Privy app JWKS URL)",
    )
    auth_issuer: str = Field(default="", description="Expected token issuer, empty to skip")
    auth_audience: str = Field(default="", description="Expected token audience, empty to skip")
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for HS256 tokens (local development and tests)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    # Supabase storage
    supabase_url: str = Field(
        default="",
        description="Supabase project URL (e.g. https://xyzabc.supabase.co)",
    )
    supabase_service_role_key: str = Field(
        default="",
        description="Supabase service role key (server-side only, keep secret)",
    )
    storage_bucket: str = Field(default="uploads")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024)

    # Image classification
    openai_api_key: str = Field(default="")
    openai_vision_model: str = Field(default="gpt-4o")

    # Calendar
    event_timezone: str = Field(
        default="Asia/Colombo",
        description="Timezone used for day grouping and time-of-day filters",
    )
    calendar_start_date: date = Field(
        default=date(2024, 12, 29),
        description="Events starting before this date are hidden from listings",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Supabase and most hosts hand out a plain ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
