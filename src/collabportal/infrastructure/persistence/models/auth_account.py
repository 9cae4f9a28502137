"""SQLAlchemy model for the auth_accounts table.

Auth accounts hold login credentials. The profile row in ``users`` shares
the same id.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from collabportal.domain.entities.clock import utcnow
from collabportal.infrastructure.persistence.database import Base


class AuthAccountModel(Base):
    """SQLAlchemy model for the auth_accounts table.

    Attributes:
        id: Primary key (UUID string).
        email: Login email, unique.
        password_hash: Argon2 hash of the password.
        email_confirmed: Whether the email address has been confirmed.
        user_metadata: Free-form metadata such as ``full_name``.
        last_sign_in_at: Timestamp of the last successful login.
        created_at: Timestamp when the account was created.
        updated_at: Timestamp when the account was last updated.
    """

    __tablename__ = "auth_accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, comment="Account ID (UUID)")
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2id password hash",
    )
    email_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_metadata: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    last_sign_in_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<AuthAccount(id={self.id}, email={self.email})>"
