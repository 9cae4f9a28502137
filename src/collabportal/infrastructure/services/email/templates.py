"""Built-in email templates.

Each template has a subject, an HTML body and a plain-text body, all
rendered with Jinja2.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailTemplate:
    """Subject and bodies of one email type."""

    subject: str
    html_body: str
    text_body: str


_LAYOUT_OPEN = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{{ app_name }}</title></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
<div style="max-width: 600px; margin: 0 auto; padding: 30px;">
<div style="background-color: #FFB900; padding: 20px; text-align: center;">
<h1 style="margin: 0; font-size: 24px;">{{ app_name }}</h1>
</div>
"""

_LAYOUT_CLOSE = """</div>
</body>
</html>
"""

INVITATION = EmailTemplate(
    subject="You're invited to join {{ app_name }}",
    html_body=_LAYOUT_OPEN
    + """<p>Hello{% if handle_name %} {{ handle_name }}{% endif %},</p>
<p>You have been invited to join {{ app_name }}. Use the link below to complete your registration.</p>
<p style="text-align: center;"><a href="{{ registration_url }}" style="padding: 15px 30px; background-color: #FFB900; color: #000; text-decoration: none;">Complete registration</a></p>
<p>Your invitation code is <strong>{{ token }}</strong>. It expires in {{ expires_in_hours }} hours.</p>
"""
    + _LAYOUT_CLOSE,
    text_body="""Hello{% if handle_name %} {{ handle_name }}{% endif %},

You have been invited to join {{ app_name }}.

Complete your registration here: {{ registration_url }}

Your invitation code is {{ token }}. It expires in {{ expires_in_hours }} hours.
""",
)

PASSWORD_RESET = EmailTemplate(
    subject="Reset your {{ app_name }} password",
    html_body=_LAYOUT_OPEN
    + """<p>We received a request to reset the password for {{ email }}.</p>
<p style="text-align: center;"><a href="{{ reset_url }}" style="padding: 15px 30px; background-color: #FFB900; color: #000; text-decoration: none;">Reset password</a></p>
<p>Your reset code is <strong>{{ token }}</strong>. It expires in {{ expires_in_minutes }} minutes.</p>
<p>If you did not request this, you can ignore this email.</p>
"""
    + _LAYOUT_CLOSE,
    text_body="""We received a request to reset the password for {{ email }}.

Reset your password here: {{ reset_url }}

Your reset code is {{ token }}. It expires in {{ expires_in_minutes }} minutes.

If you did not request this, you can ignore this email.
""",
)

PROPOSAL_AVAILABLE = EmailTemplate(
    subject="New advertising opportunity: {{ proposal_title }}",
    html_body=_LAYOUT_OPEN
    + """<p>Hi {{ first_name }},</p>
<p>{{ company_name }} has a new advertising opportunity for you: <strong>{{ proposal_title }}</strong>.</p>
<div style="background-color: #f9f9f9; padding: 20px; border-left: 4px solid #FFB900;">{{ body | safe }}</div>
<p style="text-align: center;"><a href="{{ proposal_url }}" style="padding: 15px 30px; background-color: #FFB900; color: #000; text-decoration: none;">View the proposal</a></p>
"""
    + _LAYOUT_CLOSE,
    text_body="""Hi {{ first_name }},

{{ company_name }} has a new advertising opportunity for you: {{ proposal_title }}.

{{ body | striptags }}

View the proposal: {{ proposal_url }}
""",
)

TEMPLATES: dict[str, EmailTemplate] = {
    "invitation": INVITATION,
    "password_reset": PASSWORD_RESET,
    "proposal_available": PROPOSAL_AVAILABLE,
}
