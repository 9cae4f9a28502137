"""Unit tests for EmailService."""

from unittest.mock import AsyncMock

import pytest

from collabportal.core.config import Settings
from collabportal.infrastructure.services.email.console_provider import ConsoleEmailProvider
from collabportal.infrastructure.services.email_service import (
    EmailService,
    create_email_provider,
)


@pytest.fixture
def settings():
    return Settings(app_name="CollabPortal", app_url="https://portal.example.com")


@pytest.mark.asyncio
async def test_invitation_email_is_rendered(email_provider, settings):
    service = EmailService(email_provider, settings)

    sent = await service.send_invitation_email(
        to="creator@example.com",
        registration_url="https://portal.example.com/complete-registration?token=abc123",
        token="abc123",
        handle_name="@casey",
    )

    assert sent is True
    message = email_provider.sent[0]
    assert message["subject"] == "You're invited to join CollabPortal"
    assert "Hello @casey," in message["text"]
    assert "abc123" in message["html"]


@pytest.mark.asyncio
async def test_html_body_escapes_variables(email_provider, settings):
    service = EmailService(email_provider, settings)

    await service.send_invitation_email(
        to="x@example.com",
        registration_url="https://portal.example.com/r",
        token="abc123",
        handle_name="<script>",
    )

    assert "<script>" not in email_provider.sent[0]["html"]
    assert "&lt;script&gt;" in email_provider.sent[0]["html"]


@pytest.mark.asyncio
async def test_proposal_email_links_to_dashboard(email_provider, settings):
    service = EmailService(email_provider, settings)

    await service.send_proposal_available_email(
        to="creator@example.com",
        first_name="Casey",
        proposal_id="p-1",
        proposal_title="Summer launch",
        company_name="Acme",
        body="<p>Details inside</p>",
    )

    message = email_provider.sent[0]
    assert message["subject"] == "New advertising opportunity: Summer launch"
    assert "https://portal.example.com/dashboard/proposal/p-1" in message["html"]
    assert "<p>Details inside</p>" in message["html"]


@pytest.mark.asyncio
async def test_provider_failure_returns_false(settings):
    provider = AsyncMock()
    provider.send_email.side_effect = RuntimeError("smtp down")
    service = EmailService(provider, settings)

    assert await service.send_password_reset_email("a@example.com", "https://r", "deadbeef") is False


@pytest.mark.asyncio
async def test_unknown_template_returns_false(email_provider, settings):
    service = EmailService(email_provider, settings)

    assert await service.send_template_email("a@example.com", "missing", {}) is False
    assert email_provider.sent == []


def test_console_provider_is_default():
    assert isinstance(create_email_provider(Settings(email_provider="console")), ConsoleEmailProvider)


def test_resend_requires_api_key():
    with pytest.raises(ValueError, match="RESEND_API_KEY"):
        create_email_provider(Settings(email_provider="resend", resend_api_key=None))
