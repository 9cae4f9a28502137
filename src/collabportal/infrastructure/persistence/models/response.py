"""SQLAlchemy models for user responses and admin reviews."""

from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from collabportal.domain.entities.clock import utcnow
from collabportal.infrastructure.persistence.database import Base


class ResponseModel(Base):
    """A user's accept/decline submission against a proposal.

    Attributes:
        id: Primary key (UUID string).
        proposal_id: Proposal responded to.
        user_id: Responding user.
        status: ``accepted``, ``rejected`` or ``pending_update``.
        progress_status: ``no_response``, ``accepted``, ``live`` or ``completed``.
        quote: Quoted price.
        platforms: Platforms the content will be published on.
        payment_method: Payment preference (``none`` for declines).
        proposed_publish_date: Date the user proposes to publish.
        message: Free text, or the decline reason.
        disclaimer_accepted: Whether the proposal disclaimer was accepted.
        admin_approved_at: When an admin approved the response.
        campaign_completed_at: When the campaign was marked completed.
    """

    __tablename__ = "responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    proposal_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("proposals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    progress_status: Mapped[str] = mapped_column(String(20), nullable=False, default="no_response")
    quote: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    platforms: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False, default="none")
    proposed_publish_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    disclaimer_accepted: Mapped[bool] = mapped_column(default=False, nullable=False)
    admin_approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    campaign_completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        UniqueConstraint("proposal_id", "user_id", name="uq_responses_proposal_user"),
    )

    def __repr__(self) -> str:
        return f"<Response(id={self.id}, proposal_id={self.proposal_id}, status={self.status})>"


class AdminResponseModel(Base):
    """An admin's review disposition over a response."""

    __tablename__ = "admin_responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    response_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("responses.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    reviewed_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<AdminResponse(response_id={self.response_id}, status={self.status})>"
