"""Unit tests for PasswordResetService."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from collabportal.core.config import Settings
from collabportal.domain.entities.clock import utcnow
from collabportal.domain.exceptions import InvalidTokenError, ValidationError
from collabportal.domain.services.password_reset_service import PasswordResetService
from collabportal.infrastructure.persistence.models import PasswordResetTokenModel, UserModel


@pytest.fixture
def mock_user_repo():
    return AsyncMock()


@pytest.fixture
def mock_reset_repo():
    return AsyncMock()


@pytest.fixture
def mock_auth_provider():
    return AsyncMock()


@pytest.fixture
def mock_email_service():
    service = AsyncMock()
    service.send_password_reset_email.return_value = True
    return service


@pytest.fixture
def reset_service(mock_user_repo, mock_reset_repo, mock_auth_provider, mock_email_service):
    """PasswordResetService instance with mocked dependencies."""
    return PasswordResetService(
        session=AsyncMock(),
        user_repo=mock_user_repo,
        reset_repo=mock_reset_repo,
        auth_provider=mock_auth_provider,
        email_service=mock_email_service,
        settings=Settings(app_url="https://portal.example.com"),
    )


def make_token(expires_in: timedelta) -> PasswordResetTokenModel:
    return PasswordResetTokenModel(
        id="tok-1",
        email="user@example.com",
        token="abcd1234",
        status="pending",
        expires_at=utcnow() + expires_in,
    )


@pytest.mark.asyncio
async def test_request_for_unknown_email_is_silent(reset_service, mock_user_repo, mock_email_service):
    mock_user_repo.get_by_email.return_value = None

    assert await reset_service.request_reset("nobody@example.com") is None
    mock_email_service.send_password_reset_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_request_issues_token_and_emails_link(
    reset_service, mock_user_repo, mock_reset_repo, mock_email_service
):
    mock_user_repo.get_by_email.return_value = UserModel(id="u1", email="user@example.com")
    mock_reset_repo.get_pending_by_email.return_value = None

    url = await reset_service.request_reset("  User@Example.com ")

    created = mock_reset_repo.create.await_args.args[0]
    assert created.email == "user@example.com"
    assert len(created.token) == 8
    assert url == (
        f"https://portal.example.com/reset-password?email=user%40example.com&token={created.token}"
    )
    mock_email_service.send_password_reset_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_request_refreshes_pending_token(reset_service, mock_user_repo, mock_reset_repo):
    mock_user_repo.get_by_email.return_value = UserModel(id="u1", email="user@example.com")
    existing = make_token(timedelta(minutes=5))
    mock_reset_repo.get_pending_by_email.return_value = existing

    await reset_service.request_reset("user@example.com")

    mock_reset_repo.reissue.assert_awaited_once()
    mock_reset_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_short_password_is_rejected_before_any_lookup(
    reset_service, mock_reset_repo, mock_auth_provider
):
    with pytest.raises(ValidationError, match="at least 6 characters"):
        await reset_service.reset("user@example.com", "abcd1234", "abc")

    mock_reset_repo.find_pending.assert_not_awaited()
    mock_auth_provider.update_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_expired_token_is_marked_expired(reset_service, mock_reset_repo):
    token = make_token(timedelta(minutes=-1))
    mock_reset_repo.find_pending.return_value = token

    result = await reset_service.validate("user@example.com", "abcd1234")

    assert result.valid is False
    assert result.message == "This password reset token has expired"
    status = mock_reset_repo.set_status.await_args.args[1]
    assert status.value == "expired"


@pytest.mark.asyncio
async def test_reset_with_unknown_token(reset_service, mock_reset_repo):
    mock_reset_repo.find_pending.return_value = None

    with pytest.raises(InvalidTokenError, match="Invalid password reset token"):
        await reset_service.reset("user@example.com", "ffffffff", "new-password")


@pytest.mark.asyncio
async def test_reset_updates_password_and_spends_token(
    reset_service, mock_user_repo, mock_reset_repo, mock_auth_provider
):
    token = make_token(timedelta(minutes=30))
    mock_reset_repo.find_pending.return_value = token
    mock_user_repo.get_by_email.return_value = UserModel(id="u1", email="user@example.com")
    mock_auth_provider.update_user.return_value = MagicMock()

    user = await reset_service.reset("user@example.com", "abcd1234", "new-password")

    assert user.id == "u1"
    mock_auth_provider.update_user.assert_awaited_once_with("u1", password="new-password")
    assert mock_reset_repo.set_status.await_args.args[1].value == "used"
