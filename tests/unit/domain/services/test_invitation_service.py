"""Unit tests for InvitationService backed by an in-memory database."""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.invitation import InvitationRejection
from collabportal.domain.exceptions import InvalidTokenError, ValidationError
from collabportal.infrastructure.api.dependencies import get_invitation_service
from collabportal.infrastructure.persistence.models import InvitationModel, UserModel


@pytest.fixture
def invitation_service(db_session, email_service):
    return get_invitation_service(db_session, email_service)


async def pending_count(db_session, email: str) -> int:
    result = await db_session.execute(
        select(func.count())
        .select_from(InvitationModel)
        .where(InvitationModel.email == email, InvitationModel.status == "pending")
    )
    return result.scalar_one()


@pytest.mark.asyncio
async def test_invite_sends_email_with_link(invitation_service, email_provider):
    result = await invitation_service.invite(
        "New.Creator@Example.com", handle_name="@newcreator", origin="https://app.example.com/"
    )

    assert result.email == "new.creator@example.com"
    assert len(result.token) == 6
    assert result.registration_url == (
        "https://app.example.com/complete-registration"
        f"?email=new.creator%40example.com&token={result.token}"
    )
    assert result.email_sent is True
    sent = email_provider.to("new.creator@example.com")
    assert len(sent) == 1
    assert result.token in sent[0]["text"]


@pytest.mark.asyncio
async def test_reinvite_refreshes_pending_invitation(invitation_service, db_session):
    first = await invitation_service.invite("again@example.com")
    second = await invitation_service.invite("again@example.com")

    assert second.invitation_id == first.invitation_id
    assert await pending_count(db_session, "again@example.com") == 1
    assert (await invitation_service.validate("again@example.com", second.token)).valid is True


@pytest.mark.asyncio
async def test_redeem_creates_profile_and_spends_invitation(invitation_service, db_session):
    invite = await invitation_service.invite("joiner@example.com")

    user = await invitation_service.redeem(
        "joiner@example.com", "long-enough", "Jo Iner", invite.token, phone_number="555-0100"
    )

    profile = await db_session.get(UserModel, user.id)
    assert profile is not None
    assert profile.full_name == "Jo Iner"
    assert profile.role == "user"

    validation = await invitation_service.validate("joiner@example.com", invite.token)
    assert validation.valid is False
    assert validation.reason == InvitationRejection.NOT_PENDING
    assert validation.message == "Invitation is no longer valid"


@pytest.mark.asyncio
async def test_redeem_spent_invitation_is_forbidden(invitation_service):
    invite = await invitation_service.invite("twice@example.com")
    await invitation_service.redeem("twice@example.com", "long-enough", "Two", invite.token)

    with pytest.raises(InvalidTokenError) as exc_info:
        await invitation_service.redeem("twice@example.com", "long-enough", "Two", invite.token)

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_expired_invitation_is_reported(invitation_service, db_session):
    invite = await invitation_service.invite("late@example.com")
    invitation = await db_session.get(InvitationModel, invite.invitation_id)
    invitation.expires_at = utcnow() - timedelta(minutes=1)
    await db_session.commit()

    validation = await invitation_service.validate("late@example.com", invite.token)

    assert validation.valid is False
    assert validation.message == "This invitation has expired"


@pytest.mark.asyncio
async def test_short_password_is_rejected(invitation_service):
    invite = await invitation_service.invite("short@example.com")

    with pytest.raises(ValidationError, match="at least 6 characters"):
        await invitation_service.redeem("short@example.com", "abc", "Short", invite.token)


@pytest.mark.asyncio
async def test_bulk_invite_requires_existing_tag(invitation_service):
    with pytest.raises(ValidationError, match="Invalid tag ID"):
        await invitation_service.bulk_invite(["a@example.com"], "missing-tag")
