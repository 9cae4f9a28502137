"""Unit tests for VisibilityService."""

from unittest.mock import AsyncMock

import pytest

from collabportal.domain.exceptions import ValidationError
from collabportal.domain.services.visibility_service import (
    EMPTY_SELECTION_MESSAGE,
    VisibilityService,
)


@pytest.fixture
def mock_visibility_repo():
    return AsyncMock()


@pytest.fixture
def mock_tag_repo():
    return AsyncMock()


@pytest.fixture
def visibility_service(mock_visibility_repo, mock_tag_repo):
    return VisibilityService(mock_visibility_repo, mock_tag_repo, AsyncMock())


@pytest.mark.asyncio
async def test_no_tags_skips_lookup(visibility_service, mock_tag_repo):
    assert await visibility_service.compute_users_for_tags([]) == set()
    mock_tag_repo.user_ids_for_tags.assert_not_awaited()


@pytest.mark.asyncio
async def test_selection_merges_users_and_tag_members(visibility_service, mock_tag_repo):
    mock_tag_repo.user_ids_for_tags.return_value = {"u3", "u1"}

    selected = await visibility_service.resolve_selection(["u2", "u1", "u2"], ["t1"])

    assert selected == ["u2", "u1", "u3"]


@pytest.mark.asyncio
async def test_empty_selection_is_rejected(visibility_service, mock_tag_repo):
    mock_tag_repo.user_ids_for_tags.return_value = set()

    with pytest.raises(ValidationError) as exc_info:
        await visibility_service.resolve_selection([], ["empty-tag"])

    assert exc_info.value.message == EMPTY_SELECTION_MESSAGE


@pytest.mark.asyncio
async def test_replace_returns_old_and_new(visibility_service, mock_visibility_repo):
    mock_visibility_repo.user_ids_for.return_value = {"u1", "u2"}

    old, new = await visibility_service.replace("p1", ["u2", "u3"])

    assert old == {"u1", "u2"}
    assert new == {"u2", "u3"}
    mock_visibility_repo.delete_all.assert_awaited_once_with("p1")
    mock_visibility_repo.insert_many.assert_awaited_once_with("p1", ["u2", "u3"])


@pytest.mark.asyncio
async def test_replace_with_empty_list_touches_nothing(visibility_service, mock_visibility_repo):
    with pytest.raises(ValidationError):
        await visibility_service.replace("p1", [])

    mock_visibility_repo.delete_all.assert_not_awaited()
