"""Object storage providers."""

from collabportal.infrastructure.storage.base import StorageError, StoredObject, StorageProvider
from collabportal.infrastructure.storage.local_storage_provider import LocalStorageProvider
from collabportal.infrastructure.storage.s3_storage_provider import (
    S3StorageProvider,
    S3StorageSettings,
)
from collabportal.infrastructure.storage.storage_service import (
    create_storage_provider,
    get_storage_provider,
)

__all__ = [
    "LocalStorageProvider",
    "S3StorageProvider",
    "S3StorageSettings",
    "StorageError",
    "StorageProvider",
    "StoredObject",
    "create_storage_provider",
    "get_storage_provider",
]
