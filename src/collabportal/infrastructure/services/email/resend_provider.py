"""Resend email provider implementation.

Uses the Resend Python SDK for email sending via the Resend API.
"""

import asyncio

import resend
from pydantic import BaseModel, ConfigDict

from collabportal.core.logging import get_logger
from collabportal.infrastructure.services.email.email_provider import EmailProvider

logger = get_logger(__name__)


class ResendSettings(BaseModel):
    """Configuration settings for the Resend provider."""

    model_config = ConfigDict(from_attributes=True)

    api_key: str


class ResendProvider(EmailProvider):
    """Sends emails through the Resend API."""

    def __init__(self, settings: ResendSettings) -> None:
        """Initialize the Resend provider.

        Args:
            settings: Resend configuration settings.
        """
        self.settings = settings
        resend.api_key = settings.api_key

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
        reply_to: str | None = None,
    ) -> bool:
        """Send an email via Resend.

        Raises:
            Exception: If the Resend API rejects the request.
        """
        params = {
            "from": f"{from_name} <{from_email}>",
            "to": [to],
            "subject": subject,
            "html": html_body,
            "text": text_body,
        }
        if reply_to:
            params["reply_to"] = reply_to

        try:
            # The SDK is synchronous
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            error_message = str(e)
            if "Invalid API key" in error_message or "Unauthorized" in error_message:
                logger.error("Resend authentication failed", error=error_message, to=to)
            elif "rate limit" in error_message.lower():
                logger.error("Resend rate limit exceeded", error=error_message, to=to)
            else:
                logger.error("Resend API error", error=error_message, to=to)
            raise

        logger.info("Email sent via Resend", email_id=response.get("id"), to=to)
        return True

    async def test_connection(self) -> tuple[bool, str | None]:
        """Validate the API key with a lightweight domains listing."""
        try:
            await asyncio.to_thread(resend.Domains.list)
            return True, "Resend connection successful."
        except Exception as e:
            logger.error("Resend connection test failed", error=str(e))
            return False, f"Resend connection failed: {str(e)}"
