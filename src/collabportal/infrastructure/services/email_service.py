"""Email service.

Renders the built-in templates and hands them to the configured provider.
Sending never raises: a failed send is logged and reported as ``False`` so
callers can treat email as a best-effort side channel.
"""

from typing import Any

from collabportal.core.config import Settings, get_settings
from collabportal.core.logging import get_logger
from collabportal.infrastructure.services.email import (
    ConsoleEmailProvider,
    EmailProvider,
    ResendProvider,
    ResendSettings,
    SMTPProvider,
    SMTPSettings,
    TemplateRenderer,
    get_template_renderer,
)
from collabportal.infrastructure.services.email.templates import TEMPLATES

logger = get_logger(__name__)


def create_email_provider(settings: Settings) -> EmailProvider:
    """Build the email provider selected in settings.

    Args:
        settings: Application settings.

    Returns:
        The configured email provider.
    """
    if settings.email_provider == "smtp":
        return SMTPProvider(
            SMTPSettings(
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password,
                use_tls=settings.smtp_use_tls,
                use_ssl=settings.smtp_use_ssl,
                timeout=settings.smtp_timeout,
            )
        )
    if settings.email_provider == "resend":
        if not settings.resend_api_key:
            raise ValueError("COLLABPORTAL_RESEND_API_KEY is required for the resend provider")
        return ResendProvider(ResendSettings(api_key=settings.resend_api_key))
    return ConsoleEmailProvider()


class EmailService:
    """Service for sending templated emails."""

    def __init__(
        self,
        provider: EmailProvider,
        settings: Settings | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        """Initialize the email service.

        Args:
            provider: Provider used for delivery.
            settings: Application settings (sender identity, app name).
            renderer: Template renderer, defaults to the shared instance.
        """
        self.provider = provider
        self.settings = settings or get_settings()
        self.renderer = renderer or get_template_renderer()

    async def send_template_email(
        self,
        to: str,
        template_type: str,
        variables: dict[str, Any],
    ) -> bool:
        """Render a built-in template and send it.

        Args:
            to: Recipient email address.
            template_type: Key of the template (e.g. ``invitation``).
            variables: Template variables.

        Returns:
            True if the provider accepted the email, False otherwise.
        """
        template = TEMPLATES.get(template_type)
        if template is None:
            logger.error("Unknown email template", template_type=template_type)
            return False

        context = {"app_name": self.settings.app_name, "app_url": self.settings.app_url, **variables}
        try:
            subject = self.renderer.render(template.subject, context, html=False)
            html_body = self.renderer.render(template.html_body, context)
            text_body = self.renderer.render(template.text_body, context, html=False)
            sent = await self.provider.send_email(
                to=to,
                subject=subject,
                html_body=html_body,
                text_body=text_body,
                from_email=self.settings.email_from,
                from_name=self.settings.email_from_name,
                reply_to=self.settings.email_reply_to,
            )
        except Exception as e:
            logger.error(
                "Failed to send email",
                to=to,
                template_type=template_type,
                error=str(e),
            )
            return False

        if sent:
            logger.info("Email sent", to=to, template_type=template_type)
        return bool(sent)

    async def send_invitation_email(
        self,
        to: str,
        registration_url: str,
        token: str,
        handle_name: str | None = None,
    ) -> bool:
        """Send the invitation email."""
        return await self.send_template_email(
            to=to,
            template_type="invitation",
            variables={
                "registration_url": registration_url,
                "token": token,
                "handle_name": handle_name,
                "expires_in_hours": self.settings.invitation_expire_hours,
            },
        )

    async def send_password_reset_email(self, to: str, reset_url: str, token: str) -> bool:
        """Send the password reset email."""
        return await self.send_template_email(
            to=to,
            template_type="password_reset",
            variables={
                "email": to,
                "reset_url": reset_url,
                "token": token,
                "expires_in_minutes": self.settings.password_reset_expire_minutes,
            },
        )

    async def send_proposal_available_email(
        self,
        to: str,
        first_name: str,
        proposal_id: str,
        proposal_title: str,
        company_name: str,
        body: str,
    ) -> bool:
        """Announce a proposal to a user who can now see it."""
        return await self.send_template_email(
            to=to,
            template_type="proposal_available",
            variables={
                "first_name": first_name,
                "proposal_title": proposal_title,
                "company_name": company_name,
                "body": body,
                "proposal_url": f"{self.settings.app_url}/dashboard/proposal/{proposal_id}",
            },
        )


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get the global email service instance."""
    global _email_service
    if _email_service is None:
        settings = get_settings()
        _email_service = EmailService(create_email_provider(settings), settings)
    return _email_service
