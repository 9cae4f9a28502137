"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from collabportal.core.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.api_prefix == "/api"
    assert settings.min_password_length == 6
    assert settings.invitation_expire_hours == 24
    assert settings.password_reset_expire_minutes == 60
    assert settings.storage_backend == "local"


def test_cors_origins_from_comma_separated_string():
    settings = Settings(cors_origins="https://a.example.com, https://b.example.com")
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]


def test_app_url_trailing_slash_is_stripped():
    assert Settings(app_url="https://portal.example.com/").app_url == "https://portal.example.com"


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(database_url="sqlite+aiosqlite:///./x.db", workers=4)


def test_postgres_allows_multiple_workers():
    settings = Settings(database_url="postgresql+asyncpg://u:p@localhost/db", workers=4)
    assert settings.database_url_sync == "postgresql://u:p@localhost/db"


def test_s3_backend_requires_bucket():
    with pytest.raises(ValidationError, match="COLLABPORTAL_S3_BUCKET"):
        Settings(storage_backend="s3", s3_bucket=None)


def test_environment_flags(monkeypatch):
    monkeypatch.setenv("COLLABPORTAL_ENVIRONMENT", "production")
    settings = Settings()
    assert settings.is_production is True
    assert settings.is_development is False
