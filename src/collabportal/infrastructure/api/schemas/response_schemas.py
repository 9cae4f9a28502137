"""Pydantic schemas for responses, chats and notifications."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from collabportal.domain.entities import AdminResponseStatus


class ResponseDetail(BaseModel):
    """A user's response as stored."""

    id: str
    proposal_id: str
    user_id: str
    status: str
    progress_status: str
    quote: float | None = None
    platforms: list[str] = Field(default_factory=list)
    payment_method: str
    proposed_publish_date: date | None = None
    message: str | None = None
    disclaimer_accepted: bool
    admin_approved_at: datetime | None = None
    campaign_completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminResponseDetail(BaseModel):
    """The admin's disposition over a response."""

    id: str
    status: str
    reviewed_by: str | None = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProposalSummary(BaseModel):
    """Proposal fields shown next to a response."""

    id: str
    title: str
    company_name: str
    campaign_start_date: date
    campaign_end_date: date
    logo_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ResponseViewResponse(BaseModel):
    """A response with its review state and derived flags."""

    response: ResponseDetail
    admin_response: AdminResponseDetail | None = None
    proposal: ProposalSummary | None = None
    effective_status: str | None = None
    progress: str
    can_edit: bool
    should_prompt_review: bool

    model_config = ConfigDict(from_attributes=True)


class ReviewRequest(BaseModel):
    """Request body for an admin review."""

    model_config = ConfigDict(populate_by_name=True)

    status: AdminResponseStatus
    message: str | None = None
    request_update: bool = Field(False, alias="requestUpdate")


class ChatResponse(BaseModel):
    """Chat between one user and the admins about one proposal."""

    id: str
    proposal_id: str
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatMessageResponse(BaseModel):
    """One chat message."""

    id: str
    chat_id: str
    user_id: str
    message: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostMessageRequest(BaseModel):
    """Request body for posting a chat message."""

    message: str = ""


class NotificationResponse(BaseModel):
    """In-app notification."""

    id: str
    title: str
    message: str
    type: str
    link_url: str | None = None
    related_proposal_id: str | None = None
    related_response_id: str | None = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
