"""SQLAlchemy model for the invitations table.

Invitations let admins onboard a specific email address with a short token.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from collabportal.domain.entities.clock import utcnow
from collabportal.infrastructure.persistence.database import Base


class InvitationModel(Base):
    """SQLAlchemy model for the invitations table.

    Attributes:
        id: Primary key (UUID string).
        email: Email address of the invited user.
        handle_name: Optional social handle of the invitee.
        tag_id: Optional tag assigned when the invitee signs up.
        token: Short hex token sent to the invitee.
        status: ``pending`` or ``completed``.
        expires_at: Timestamp when the invitation expires.
        created_at: Timestamp when the invitation was created.
        updated_at: Timestamp when the invitation was last reissued.
        completed_at: Timestamp when the invitation was redeemed.
    """

    __tablename__ = "invitations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, comment="Invitation ID (UUID)")
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Email address of the invited user",
    )
    handle_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tag_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("tags.id", ondelete="SET NULL"),
        nullable=True,
        comment="Tag assigned on signup",
    )
    token: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="Hex token for completing registration",
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Timestamp when the invitation expires",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        # One pending invitation per email
        Index(
            "uq_invitations_pending_email",
            "email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
        Index("ix_invitations_email_token", "email", "token"),
    )

    def __repr__(self) -> str:
        return f"<Invitation(id={self.id}, email={self.email}, status={self.status})>"
