"""Storage provider selection."""

from collabportal.core.config import Settings, get_settings
from collabportal.core.logging import get_logger
from collabportal.infrastructure.storage.base import StorageProvider
from collabportal.infrastructure.storage.local_storage_provider import LocalStorageProvider
from collabportal.infrastructure.storage.s3_storage_provider import (
    S3StorageProvider,
    S3StorageSettings,
)

logger = get_logger(__name__)


def create_storage_provider(settings: Settings) -> StorageProvider:
    """Build the storage provider selected in settings."""
    if settings.storage_backend == "s3":
        logger.info("Using S3 storage", bucket=settings.s3_bucket, region=settings.s3_region)
        return S3StorageProvider(
            S3StorageSettings(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                access_key_id=settings.s3_access_key_id,
                secret_access_key=settings.s3_secret_access_key,
                endpoint_url=settings.s3_endpoint_url,
            )
        )
    return LocalStorageProvider(settings.storage_path, settings.storage_public_url)


_storage_provider: StorageProvider | None = None


def get_storage_provider() -> StorageProvider:
    """Get the global storage provider instance."""
    global _storage_provider
    if _storage_provider is None:
        _storage_provider = create_storage_provider(get_settings())
    return _storage_provider
