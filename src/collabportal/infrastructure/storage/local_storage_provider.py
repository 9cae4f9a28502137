"""Local filesystem storage provider."""

import asyncio
from pathlib import Path

from collabportal.infrastructure.storage.base import StorageError, StoredObject, StorageProvider


class LocalStorageProvider(StorageProvider):
    """Stores objects under ``<storage_path>/<bucket>/<key>``.

    The API serves the storage directory at ``public_url``.
    """

    def __init__(self, storage_path: str, public_url: str) -> None:
        self.storage_path = Path(storage_path).resolve()
        self.public_url = public_url.rstrip("/")

    def _resolve(self, bucket: str, key: str) -> Path:
        path = (self.storage_path / bucket / key).resolve()
        if not path.is_relative_to(self.storage_path):
            raise StorageError(f"Invalid object key: {key}")
        return path

    async def upload(self, bucket: str, key: str, content: bytes, content_type: str) -> StoredObject:
        path = self._resolve(bucket, key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageError(f"Failed to store file: {str(e)}") from e

        return StoredObject(
            bucket=bucket,
            key=key,
            url=f"{self.public_url}/{bucket}/{key}",
            size=len(content),
            content_type=content_type,
        )

    async def delete(self, bucket: str, key: str) -> None:
        path = self._resolve(bucket, key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as e:
            raise StorageError(f"Failed to delete file: {str(e)}") from e

    async def test_connection(self) -> tuple[bool, str | None]:
        """Verify that the storage path is writable."""
        try:
            self.storage_path.mkdir(parents=True, exist_ok=True)
            check_file = self.storage_path / ".storage_provider_check"
            check_file.write_text("ok", encoding="utf-8")
            check_file.unlink(missing_ok=True)
            return True, f"Local storage is writable at '{self.storage_path}'."
        except OSError as e:
            return False, f"Local storage test failed: {str(e)}"
