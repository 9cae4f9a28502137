"""Configuration management for CollabPortal.

Settings are loaded from environment variables (prefixed ``COLLABPORTAL_``)
and an optional .env file, validated once at startup and cached.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production-use-openssl-rand-hex-32"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COLLABPORTAL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "CollabPortal"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api"
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public URL of the web client, used to build links in emails",
    )

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/collabportal.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Security Settings
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        description="Secret key for JWT token signing",
    )
    access_token_expire_minutes: int = 60

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Invitation / Password Reset Lifecycle
    invitation_expire_hours: int = 24
    password_reset_expire_minutes: int = 60
    min_password_length: int = 6

    # Storage Settings
    storage_backend: Literal["local", "s3"] = "local"
    storage_path: str = "./data/storage"
    storage_public_url: str = Field(
        default="http://localhost:8000/storage",
        description="Base URL under which uploaded objects are publicly served",
    )
    rich_text_bucket: str = "rich-text"
    logo_bucket: str = "company-logos"
    avatar_bucket: str = "avatars"
    max_image_size: int = 5 * 1024 * 1024  # 5MB in bytes
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_access_key_id: str | None = None
    s3_secret_access_key: str | None = None
    s3_endpoint_url: str | None = None

    # Email Settings
    email_provider: Literal["console", "smtp", "resend"] = "console"
    email_from: str = "noreply@collabportal.local"
    email_from_name: str = "CollabPortal"
    email_reply_to: str | None = None
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    smtp_timeout: int = 10
    resend_api_key: str | None = None

    # Bootstrap Admin
    admin_email: str | None = Field(
        default=None,
        description="Email for the initial admin (auto-created on startup if set)",
    )
    admin_password: str | None = Field(
        default=None,
        description="Password for the initial admin (auto-created on startup if set)",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("app_url", "storage_public_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended directly."""
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    @model_validator(mode="after")
    def validate_storage_backend(self) -> "Settings":
        """Require a bucket name when S3 storage is selected."""
        if self.storage_backend == "s3" and not self.s3_bucket:
            raise ValueError("COLLABPORTAL_S3_BUCKET is required when storage_backend is 's3'")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def database_url_sync(self) -> str:
        """Get synchronous database URL for migrations."""
        url = self.database_url
        if url.startswith("sqlite+aiosqlite"):
            return url.replace("sqlite+aiosqlite", "sqlite")
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql")
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
