"""Service for password reset logic.

Handles token issuance, sending reset emails, and resetting passwords.
Stale tokens are marked ``expired`` the first time they are read.
"""

import uuid
from datetime import timedelta
from urllib.parse import quote

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.config import Settings, get_settings
from collabportal.core.logging import get_logger
from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.invitation import is_expired
from collabportal.domain.entities.password_reset import ResetTokenStatus, ResetValidation
from collabportal.domain.exceptions import InvalidTokenError, UpstreamError, ValidationError
from collabportal.domain.services.invitation_service import normalize_email
from collabportal.domain.services.token_issuer import issue_reset_token
from collabportal.infrastructure.auth import AuthProvider, AuthProviderError
from collabportal.infrastructure.persistence.models import PasswordResetTokenModel, UserModel
from collabportal.infrastructure.persistence.repositories import (
    PasswordResetRepository,
    UserRepository,
)
from collabportal.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)

REQUEST_ACCEPTED_MESSAGE = (
    "If an account with this email exists, you will receive a password reset link."
)


class PasswordResetService:
    """Service for handling password reset business logic."""

    def __init__(
        self,
        session: AsyncSession,
        user_repo: UserRepository,
        reset_repo: PasswordResetRepository,
        auth_provider: AuthProvider,
        email_service: EmailService,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the password reset service.

        Args:
            session: SQLAlchemy async session.
            user_repo: Repository for user profiles.
            reset_repo: Repository for password reset token operations.
            auth_provider: Identity store holding the credentials.
            email_service: Service for sending emails.
            settings: Application settings.
        """
        self.session = session
        self.user_repo = user_repo
        self.reset_repo = reset_repo
        self.auth_provider = auth_provider
        self.email_service = email_service
        self.settings = settings or get_settings()

    async def request_reset(self, email: str, origin: str | None = None) -> str | None:
        """Issue a reset token and email the reset link.

        Unknown emails are ignored silently so callers cannot discover which
        addresses have accounts.

        Args:
            email: Email address of the account.
            origin: Base URL for the reset link, defaults to ``app_url``.

        Returns:
            The reset URL when a token was issued, None otherwise.

        Raises:
            ValidationError: If no email was given.
            UpstreamError: If the token could not be stored.
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")

        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None

        token = issue_reset_token()
        expires_at = utcnow() + timedelta(minutes=self.settings.password_reset_expire_minutes)

        try:
            existing = await self.reset_repo.get_pending_by_email(email)
            if existing is not None:
                await self.reset_repo.reissue(existing, token, expires_at)
            else:
                await self.reset_repo.create(
                    PasswordResetTokenModel(
                        id=str(uuid.uuid4()),
                        email=email,
                        token=token,
                        status=ResetTokenStatus.PENDING.value,
                        expires_at=expires_at,
                    )
                )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to store password reset token", email=email, error=str(e))
            raise UpstreamError("Failed to process password reset request") from e

        base = (origin or self.settings.app_url).rstrip("/")
        reset_url = f"{base}/reset-password?email={quote(email)}&token={token}"

        sent = await self.email_service.send_password_reset_email(
            to=email, reset_url=reset_url, token=token
        )
        if not sent:
            logger.error("Failed to send password reset email", email=email)
        return reset_url

    async def _check(self, email: str, token: str) -> tuple[PasswordResetTokenModel | None, bool]:
        """Find the pending token and expire it if stale.

        Returns:
            Tuple of (token row or None, whether it had expired).
        """
        reset_token = await self.reset_repo.find_pending(email, token)
        if reset_token is None:
            return None, False
        if is_expired(reset_token.expires_at):
            await self.reset_repo.set_status(reset_token, ResetTokenStatus.EXPIRED)
            await self.session.commit()
            logger.info("Password reset token expired", email=email)
            return reset_token, True
        return reset_token, False

    async def validate(self, email: str, token: str) -> ResetValidation:
        """Check whether a reset token can be used.

        Args:
            email: Email address of the account.
            token: Reset token.

        Returns:
            The validation outcome.
        """
        email = normalize_email(email)
        token = (token or "").strip()
        if not email or not token:
            raise ValidationError("Email and token are required")

        reset_token, expired = await self._check(email, token)
        if reset_token is None:
            return ResetValidation(valid=False, message="Invalid password reset token or email")
        if expired:
            return ResetValidation(valid=False, message="This password reset token has expired")
        return ResetValidation(
            valid=True, message="Password reset token is valid", token=reset_token
        )

    async def reset(self, email: str, token: str, new_password: str) -> UserModel:
        """Set a new password using a valid reset token.

        Args:
            email: Email address of the account.
            token: Reset token.
            new_password: The new password.

        Returns:
            The user whose password was changed.

        Raises:
            ValidationError: If input is missing, too short, or the user is gone.
            InvalidTokenError: If the token is unknown, spent or expired.
            UpstreamError: If the password could not be updated.
        """
        email = normalize_email(email)
        token = (token or "").strip()
        if not email or not token or not new_password:
            raise ValidationError("Email, token, and new password are required")
        min_length = self.settings.min_password_length
        if len(new_password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters long")

        reset_token, expired = await self._check(email, token)
        if reset_token is None:
            raise InvalidTokenError("Invalid password reset token")
        if expired:
            raise InvalidTokenError("Password reset token has expired")

        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise ValidationError("User not found")

        try:
            await self.auth_provider.update_user(user.id, password=new_password)
            await self.session.commit()
        except (AuthProviderError, SQLAlchemyError) as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to update password: {e}") from e

        try:
            await self.reset_repo.set_status(reset_token, ResetTokenStatus.USED)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to mark reset token used", email=email, error=str(e))

        logger.info("Password reset successfully", user_id=user.id, email=email)
        return user
