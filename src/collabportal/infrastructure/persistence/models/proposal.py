"""SQLAlchemy models for proposals and their visibility lists."""

from datetime import date, datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from collabportal.domain.entities.clock import utcnow
from collabportal.infrastructure.persistence.database import Base

DATE_CHECK_CONSTRAINT = "date_check"


class ProposalModel(Base):
    """SQLAlchemy model for the proposals table.

    Attributes:
        id: Primary key (UUID string).
        title: Campaign title.
        company_name: Sponsoring company.
        campaign_start_date: First day of the campaign.
        campaign_end_date: Last day of the campaign.
        short_description: Summary shown in listings.
        content: Rich-text document ``{"type", "html", "blocks"}``.
        disclaimer: Optional disclaimer text.
        email_template_body: Optional announcement email body.
        logo_url: Optional public logo URL.
        created_by: Admin who authored the proposal.
    """

    __tablename__ = "proposals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    campaign_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    campaign_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    short_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    disclaimer: Mapped[str | None] = mapped_column(Text, nullable=True)
    email_template_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_by: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        CheckConstraint(
            "campaign_end_date >= campaign_start_date",
            name=DATE_CHECK_CONSTRAINT,
        ),
    )

    def __repr__(self) -> str:
        return f"<Proposal(id={self.id}, title={self.title})>"


class ProposalVisibilityModel(Base):
    """A user allowed to see a proposal."""

    __tablename__ = "proposal_visibility"

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
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("proposal_id", "user_id", name="uq_proposal_visibility_pair"),
    )
