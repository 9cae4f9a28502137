"""Proposal entity.

A proposal is a sponsorship campaign authored by an admin. Its campaign
window must be well-formed before anything is persisted.
"""

from dataclasses import dataclass, field
from datetime import date

from collabportal.domain.entities.clock import utc_today
from collabportal.domain.exceptions import ValidationError

RICH_TEXT_DOCUMENT_TYPE = "rich-text"


def validate_campaign_dates(
    start: date | None,
    end: date | None,
    reject_past_start: bool = False,
    today: date | None = None,
) -> None:
    """Validate a campaign window.

    Args:
        start: Campaign start date.
        end: Campaign end date.
        reject_past_start: Also reject a start date before today.
        today: Reference date, defaults to today in UTC.

    Raises:
        ValidationError: If either date is missing or the window is inverted.
    """
    if start is None or end is None:
        raise ValidationError("Both start and end dates are required")
    if reject_past_start and start < (today or utc_today()):
        raise ValidationError("Campaign start date cannot be in the past")
    if end < start:
        raise ValidationError("Campaign end date must be after start date")


@dataclass
class ProposalDraft:
    """Admin input for creating or editing a proposal.

    Attributes:
        title: Campaign title.
        company_name: Sponsoring company.
        campaign_start_date: First day of the campaign.
        campaign_end_date: Last day of the campaign (may equal the start).
        short_description: One-paragraph summary.
        content_html: Rich-text body, possibly with inline base64 images.
        disclaimer: Optional disclaimer users must accept.
        email_template_body: Optional body of the announcement email.
        logo_url: Optional public URL of the company logo.
        user_ids: Users explicitly selected for visibility.
        tag_ids: Tags whose members also get visibility.
    """

    title: str
    company_name: str
    campaign_start_date: date | None
    campaign_end_date: date | None
    short_description: str = ""
    content_html: str = ""
    disclaimer: str | None = None
    email_template_body: str | None = None
    logo_url: str | None = None
    user_ids: list[str] = field(default_factory=list)
    tag_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate required text fields."""
        if not self.title or not self.title.strip():
            raise ValidationError("Title is required")
        if not self.company_name or not self.company_name.strip():
            raise ValidationError("Company name is required")


def build_document(html: str) -> dict:
    """Wrap rich-text HTML in the stored document shape."""
    return {
        "type": RICH_TEXT_DOCUMENT_TYPE,
        "html": html,
        "blocks": [{"type": "html", "content": html}],
    }


def document_html(content: dict | str | None) -> str:
    """Extract the HTML body from a stored document."""
    if not content:
        return ""
    if isinstance(content, str):
        return content
    return content.get("html", "")
