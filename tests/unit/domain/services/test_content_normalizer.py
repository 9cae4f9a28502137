"""Unit tests for inline image normalization."""

import base64
from unittest.mock import AsyncMock

import pytest

from collabportal.domain.services.content_normalizer import ContentNormalizer
from collabportal.infrastructure.storage import StorageError, StoredObject

PNG_B64 = base64.b64encode(b"\x89PNG fake image bytes").decode()


def stored(url: str) -> StoredObject:
    return StoredObject(bucket="rich-text", key="k", url=url, size=10, content_type="image/png")


@pytest.fixture
def mock_storage():
    storage = AsyncMock()
    storage.upload.return_value = stored("https://cdn.example.com/a.png")
    return storage


@pytest.mark.asyncio
async def test_html_without_images_is_returned_unchanged(mock_storage):
    normalizer = ContentNormalizer(mock_storage, "rich-text")
    html = "<p>Hello <b>world</b></p>"

    result = await normalizer.normalize(html)

    assert result is html
    mock_storage.upload.assert_not_awaited()


@pytest.mark.asyncio
async def test_inline_image_is_uploaded_and_src_rewritten(mock_storage):
    normalizer = ContentNormalizer(mock_storage, "rich-text")
    html = f'<p>Intro</p><img alt="x" src="data:image/png;base64,{PNG_B64}" width="50">'

    result = await normalizer.normalize(html)

    assert result == '<p>Intro</p><img alt="x" src="https://cdn.example.com/a.png" width="50">'
    bucket, key, content, content_type = mock_storage.upload.await_args.args
    assert bucket == "rich-text"
    assert key.startswith("rich-text-images/") and key.endswith(".png")
    assert content == b"\x89PNG fake image bytes"
    assert content_type == "image/png"


@pytest.mark.asyncio
async def test_invalid_base64_image_is_left_alone(mock_storage):
    normalizer = ContentNormalizer(mock_storage, "rich-text")
    good = f'<img src="data:image/png;base64,{PNG_B64}">'
    bad = '<img src="data:image/jpeg;base64,@@not-base64@@">'

    result = await normalizer.normalize(good + bad)

    assert result == '<img src="https://cdn.example.com/a.png">' + bad
    assert mock_storage.upload.await_count == 1


@pytest.mark.asyncio
async def test_failed_upload_keeps_original_src(mock_storage):
    mock_storage.upload.side_effect = StorageError("bucket missing")
    normalizer = ContentNormalizer(mock_storage, "rich-text")
    html = f"<img src='data:image/gif;base64,{PNG_B64}'>"

    assert await normalizer.normalize(html) == html


@pytest.mark.asyncio
async def test_oversized_image_is_skipped(mock_storage):
    normalizer = ContentNormalizer(mock_storage, "rich-text", max_image_size=4)
    html = f'<img src="data:image/png;base64,{PNG_B64}">'

    assert await normalizer.normalize(html) == html
    mock_storage.upload.assert_not_awaited()


@pytest.mark.asyncio
async def test_images_upload_in_document_order(mock_storage):
    mock_storage.upload.side_effect = [stored("u1"), stored("u2")]
    normalizer = ContentNormalizer(mock_storage, "rich-text")
    html = (
        f'<img src="data:image/png;base64,{PNG_B64}"><p>between</p>'
        f'<img src="data:image/webp;base64,{PNG_B64}">'
    )

    result = await normalizer.normalize(html)

    assert result == '<img src="u1"><p>between</p><img src="u2">'
    second_key = mock_storage.upload.await_args_list[1].args[1]
    assert second_key.endswith(".webp")


@pytest.mark.asyncio
async def test_failed_second_upload_keeps_first_rewrite(mock_storage):
    mock_storage.upload.side_effect = [stored("u1"), StorageError("quota exceeded")]
    normalizer = ContentNormalizer(mock_storage, "rich-text")
    second = f'<img src="data:image/jpeg;base64,{PNG_B64}" alt="two">'
    html = f'<img src="data:image/png;base64,{PNG_B64}" alt="one"><p>x</p>' + second

    result = await normalizer.normalize(html)

    assert result == '<img src="u1" alt="one"><p>x</p>' + second
    assert mock_storage.upload.await_count == 2


@pytest.mark.asyncio
async def test_only_the_src_attribute_is_rewritten(mock_storage):
    normalizer = ContentNormalizer(mock_storage, "rich-text")
    lazy = f'data-src="data:image/png;base64,{PNG_B64}"'
    html = f'<img {lazy} src="data:image/png;base64,{PNG_B64}">'

    result = await normalizer.normalize(html)

    assert result == f'<img {lazy} src="https://cdn.example.com/a.png">'
    assert mock_storage.upload.await_count == 1
