"""Console email provider.

Writes outgoing emails to the log instead of delivering them. Used in
development and tests.
"""

from collabportal.core.logging import get_logger
from collabportal.infrastructure.services.email.email_provider import EmailProvider

logger = get_logger(__name__)


class ConsoleEmailProvider(EmailProvider):
    """Email provider that logs messages."""

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
        logger.info(
            "[EMAIL] Outgoing email",
            to=to,
            subject=subject,
            sender=f"{from_name} <{from_email}>",
            body=text_body,
        )
        return True

    async def test_connection(self) -> tuple[bool, str | None]:
        return True, "Console provider logs emails instead of sending them."
