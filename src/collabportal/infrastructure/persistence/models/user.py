"""SQLAlchemy model for the users (profile) table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.user import DEFAULT_AVATAR_URL
from collabportal.infrastructure.persistence.database import Base


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key, same value as the auth account id.
        email: Email address.
        full_name: Display name.
        phone_number: Optional contact number.
        role: ``admin`` or ``user``.
        avatar_url: Avatar image URL.
        created_at: Timestamp when the profile was created.
        updated_at: Timestamp when the profile was last updated.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("auth_accounts.id", ondelete="CASCADE"),
        primary_key=True,
        comment="User ID (same as auth account ID)",
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="user",
        comment="Role: admin or user",
    )
    avatar_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default=DEFAULT_AVATAR_URL,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
