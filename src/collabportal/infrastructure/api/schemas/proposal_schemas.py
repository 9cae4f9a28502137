"""Pydantic schemas for proposal endpoints."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from collabportal.domain.entities import PaymentMethod, ProposalDraft
from collabportal.domain.entities.proposal import document_html


class ProposalRequest(BaseModel):
    """Request body for creating or editing a proposal."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    company_name: str = Field("", alias="companyName")
    campaign_start_date: date | None = Field(None, alias="campaignStartDate")
    campaign_end_date: date | None = Field(None, alias="campaignEndDate")
    short_description: str = Field("", alias="shortDescription")
    content: str = Field("", description="Rich-text HTML body")
    disclaimer: str | None = None
    email_template_body: str | None = Field(None, alias="emailTemplateBody")
    logo_url: str | None = Field(None, alias="logoUrl")
    user_ids: list[str] = Field(default_factory=list, alias="userIds")
    tag_ids: list[str] = Field(default_factory=list, alias="tagIds")

    def to_draft(self) -> ProposalDraft:
        """Convert to the domain draft, validating required text fields."""
        return ProposalDraft(
            title=self.title,
            company_name=self.company_name,
            campaign_start_date=self.campaign_start_date,
            campaign_end_date=self.campaign_end_date,
            short_description=self.short_description,
            content_html=self.content,
            disclaimer=self.disclaimer or None,
            email_template_body=self.email_template_body,
            logo_url=self.logo_url,
            user_ids=self.user_ids,
            tag_ids=self.tag_ids,
        )


class ProposalResponse(BaseModel):
    """Proposal details."""

    id: str
    title: str
    company_name: str
    campaign_start_date: date
    campaign_end_date: date
    short_description: str
    content: dict[str, Any]
    content_html: str
    disclaimer: str | None = None
    email_template_body: str | None = None
    logo_url: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    user_ids: list[str] | None = Field(None, description="Audience, admin views only")

    @classmethod
    def from_model(cls, proposal: Any, user_ids: set[str] | None = None) -> "ProposalResponse":
        return cls(
            id=proposal.id,
            title=proposal.title,
            company_name=proposal.company_name,
            campaign_start_date=proposal.campaign_start_date,
            campaign_end_date=proposal.campaign_end_date,
            short_description=proposal.short_description,
            content=proposal.content or {},
            content_html=document_html(proposal.content),
            disclaimer=proposal.disclaimer,
            email_template_body=proposal.email_template_body,
            logo_url=proposal.logo_url,
            created_by=proposal.created_by,
            created_at=proposal.created_at,
            updated_at=proposal.updated_at,
            user_ids=sorted(user_ids) if user_ids is not None else None,
        )


class SendEmailRequest(BaseModel):
    """Request body for (re)sending the announcement email."""

    model_config = ConfigDict(populate_by_name=True)

    user_ids: list[str] | None = Field(None, alias="userIds")


class AcceptRequest(BaseModel):
    """Request body for accepting a proposal."""

    model_config = ConfigDict(populate_by_name=True)

    quote: float | None = None
    proposed_publish_date: date | None = Field(None, alias="proposedPublishDate")
    platforms: list[str] = Field(default_factory=list)
    payment_method: PaymentMethod | None = Field(None, alias="paymentMethod")
    message: str | None = None
    disclaimer_accepted: bool = Field(False, alias="disclaimerAccepted")


class DeclineRequest(BaseModel):
    """Request body for declining a proposal."""

    reason: str | None = None


class ResubmitRequest(AcceptRequest):
    """Request body for changing a response while it is still editable."""

    accept: bool = True
    reason: str | None = None
