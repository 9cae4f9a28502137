"""Email providers and template rendering."""

from collabportal.infrastructure.services.email.console_provider import ConsoleEmailProvider
from collabportal.infrastructure.services.email.email_provider import EmailProvider
from collabportal.infrastructure.services.email.resend_provider import (
    ResendProvider,
    ResendSettings,
)
from collabportal.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from collabportal.infrastructure.services.email.template_renderer import (
    TemplateRenderer,
    get_template_renderer,
)

__all__ = [
    "ConsoleEmailProvider",
    "EmailProvider",
    "ResendProvider",
    "ResendSettings",
    "SMTPProvider",
    "SMTPSettings",
    "TemplateRenderer",
    "get_template_renderer",
]
