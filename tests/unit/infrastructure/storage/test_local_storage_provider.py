"""Unit tests for LocalStorageProvider."""

import pytest

from collabportal.infrastructure.storage import StorageError


@pytest.mark.asyncio
async def test_upload_writes_file_and_returns_public_url(storage, tmp_path):
    stored = await storage.upload("company-logos", "logos/acme.png", b"png-bytes", "image/png")

    assert stored.url == "http://test/storage/company-logos/logos/acme.png"
    assert stored.size == 9
    assert (tmp_path / "storage" / "company-logos" / "logos" / "acme.png").read_bytes() == b"png-bytes"


@pytest.mark.asyncio
async def test_key_cannot_escape_storage_root(storage):
    with pytest.raises(StorageError, match="Invalid object key"):
        await storage.upload("rich-text", "../../outside.txt", b"x", "text/plain")


@pytest.mark.asyncio
async def test_delete_missing_object_is_not_an_error(storage):
    await storage.delete("rich-text", "never-uploaded.png")


@pytest.mark.asyncio
async def test_connection_check(storage):
    ok, message = await storage.test_connection()
    assert ok is True
    assert "writable" in message
