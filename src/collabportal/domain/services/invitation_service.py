"""Service for the invitation lifecycle.

Admins invite an email address; the invitee redeems the emailed token to set
a password and create a profile. Re-inviting an email with a pending
invitation refreshes that invitation instead of creating a second one.
"""

import secrets
import uuid
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any
from urllib.parse import quote

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.config import Settings, get_settings
from collabportal.core.logging import get_logger
from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.invitation import (
    InvitationRejection,
    InvitationStatus,
    InvitationValidation,
    InviteResult,
    is_expired,
)
from collabportal.domain.entities.user import AuthUser
from collabportal.domain.exceptions import (
    InvalidTokenError,
    NotFoundError,
    PortalError,
    UpstreamError,
    ValidationError,
)
from collabportal.domain.services.token_issuer import issue_invitation_token
from collabportal.infrastructure.auth import AuthProvider, AuthProviderError, AuthUserExistsError
from collabportal.infrastructure.persistence.models import InvitationModel, TagModel, UserModel
from collabportal.infrastructure.persistence.repositories import (
    InvitationRepository,
    TagRepository,
    UserRepository,
)
from collabportal.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)


def normalize_email(email: str | None) -> str:
    """Trim and lowercase an email address."""
    return (email or "").strip().lower()


@dataclass
class RedeemedUser:
    """Profile data returned after an invitation is redeemed."""

    id: str
    email: str
    full_name: str | None
    phone_number: str | None = None


@dataclass
class SignupResult:
    """Result of a tag-scoped self signup."""

    user: RedeemedUser
    profile: UserModel | None
    tag: TagModel


@dataclass
class BulkInviteResult:
    """Per-email outcomes of a bulk invite."""

    results: list[dict[str, Any]] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r["success"])

    @property
    def failed(self) -> int:
        return len(self.results) - self.successful

    @property
    def message(self) -> str:
        return (
            f"Processed {len(self.results)} invitations: "
            f"{self.successful} successful, {self.failed} failed"
        )


class InvitationService:
    """Service for issuing, validating and redeeming invitations."""

    def __init__(
        self,
        session: AsyncSession,
        invitation_repo: InvitationRepository,
        user_repo: UserRepository,
        tag_repo: TagRepository,
        auth_provider: AuthProvider,
        email_service: EmailService,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the invitation service.

        Args:
            session: SQLAlchemy async session.
            invitation_repo: Repository for invitations.
            user_repo: Repository for user profiles.
            tag_repo: Repository for tags.
            auth_provider: Identity store used to create accounts.
            email_service: Service for sending emails.
            settings: Application settings.
        """
        self.session = session
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.tag_repo = tag_repo
        self.auth_provider = auth_provider
        self.email_service = email_service
        self.settings = settings or get_settings()

    def _registration_url(
        self, email: str, token: str, origin: str | None, tag_id: str | None = None
    ) -> str:
        base = (origin or self.settings.app_url).rstrip("/")
        if tag_id:
            return f"{base}/signup?email={quote(email)}&token={token}&tag={tag_id}"
        return f"{base}/complete-registration?email={quote(email)}&token={token}"

    async def _require_tag(self, tag_id: str, message: str) -> TagModel:
        tag = await self.tag_repo.get_by_id(tag_id)
        if tag is None:
            raise ValidationError(message)
        return tag

    async def invite(
        self,
        email: str,
        handle_name: str | None = None,
        tag_id: str | None = None,
        origin: str | None = None,
        signup_link: bool = False,
    ) -> InviteResult:
        """Issue an invitation, or refresh the pending one for this email.

        The account is created unconfirmed with a random password so the
        email is reserved; redeeming the invitation sets the real password.

        Args:
            email: Invitee email address.
            handle_name: Optional display handle for the invitee.
            tag_id: Optional tag the invitee will be grouped under.
            origin: Base URL for the registration link, defaults to ``app_url``.
            signup_link: Point the link at the tag-scoped signup page.

        Returns:
            The invitation result including the registration link.

        Raises:
            ValidationError: If the email is missing or the tag does not exist.
            UpstreamError: If the account or invitation could not be stored.
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")
        if tag_id:
            await self._require_tag(tag_id, "Invalid tag ID")

        token = issue_invitation_token()
        expires_at = utcnow() + timedelta(hours=self.settings.invitation_expire_hours)

        try:
            await self.auth_provider.create_user(
                email=email,
                password=secrets.token_urlsafe(24),
                email_confirm=False,
                user_metadata={"handle_name": handle_name} if handle_name else None,
            )
        except AuthUserExistsError:
            logger.debug("Auth user already exists, reusing", email=email)
        except AuthProviderError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to create user: {e}") from e

        try:
            invitation = await self.invitation_repo.get_pending_by_email(email)
            if invitation is not None:
                await self.invitation_repo.reissue(
                    invitation, token, expires_at, handle_name, tag_id
                )
            else:
                invitation = await self.invitation_repo.create(
                    InvitationModel(
                        id=str(uuid.uuid4()),
                        email=email,
                        handle_name=handle_name,
                        tag_id=tag_id,
                        token=token,
                        status=InvitationStatus.PENDING.value,
                        expires_at=expires_at,
                    )
                )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to save invitation", email=email, error=str(e))
            raise UpstreamError(f"Failed to save invitation: {e}") from e

        registration_url = self._registration_url(
            email, token, origin, tag_id if signup_link else None
        )
        email_sent = await self.email_service.send_invitation_email(
            to=email,
            registration_url=registration_url,
            token=token,
            handle_name=handle_name,
        )
        if not email_sent:
            logger.warning("Invitation saved but email was not sent", email=email)

        logger.info("Invitation issued", invitation_id=invitation.id, email=email)
        return InviteResult(
            invitation_id=invitation.id,
            email=email,
            handle_name=handle_name,
            token=token,
            registration_url=registration_url,
            email_sent=email_sent,
        )

    async def bulk_invite(
        self, emails: list[str], tag_id: str | None, origin: str | None = None
    ) -> BulkInviteResult:
        """Invite several emails under one tag.

        Each email is processed independently; a failure is recorded in the
        results and does not stop the remaining invitations.

        Args:
            emails: Email addresses to invite.
            tag_id: Tag every invitee is grouped under.
            origin: Base URL for the signup links.

        Returns:
            Per-email results with a summary.
        """
        if not emails:
            raise ValidationError("Emails array is required and must not be empty")
        if not tag_id:
            raise ValidationError("Tag ID is required")
        await self._require_tag(tag_id, "Invalid tag ID")

        outcome = BulkInviteResult()
        for email in dict.fromkeys(normalize_email(e) for e in emails):
            if not email:
                continue
            try:
                result = await self.invite(
                    email, tag_id=tag_id, origin=origin, signup_link=True
                )
            except PortalError as e:
                outcome.results.append({"email": email, "success": False, "error": e.message})
                continue
            outcome.results.append(
                {
                    "email": email,
                    "success": True,
                    "token": result.token,
                    "registration_url": result.registration_url,
                    "email_sent": result.email_sent,
                }
            )

        logger.info(
            "Bulk invite processed",
            tag_id=tag_id,
            total=len(outcome.results),
            failed=outcome.failed,
        )
        return outcome

    async def validate(self, email: str, token: str) -> InvitationValidation:
        """Check whether an email and token pair can be redeemed.

        Never mutates state.

        Args:
            email: Invitee email address.
            token: Invitation token.

        Returns:
            The validation outcome.
        """
        email = normalize_email(email)
        token = (token or "").strip()
        if not email or not token:
            raise ValidationError("Email and token are required")

        invitation = await self.invitation_repo.find_by_email_and_token(email, token)
        if invitation is None:
            return InvitationValidation(valid=False, reason=InvitationRejection.NOT_FOUND)
        if invitation.status != InvitationStatus.PENDING.value:
            return InvitationValidation(
                valid=False, reason=InvitationRejection.NOT_PENDING, invitation=invitation
            )
        if is_expired(invitation.expires_at):
            return InvitationValidation(
                valid=False, reason=InvitationRejection.EXPIRED, invitation=invitation
            )
        return InvitationValidation(valid=True, invitation=invitation)

    async def _claim_account(self, email: str, password: str, full_name: str | None) -> AuthUser:
        """Confirm the reserved account with the real password, creating it if absent."""
        metadata = {"full_name": full_name} if full_name else None
        try:
            auth_user = await self.auth_provider.find_user_by_email(email)
            if auth_user is not None:
                return await self.auth_provider.update_user(
                    auth_user.id,
                    password=password,
                    email_confirm=True,
                    user_metadata=metadata,
                )
            return await self.auth_provider.create_user(
                email=email,
                password=password,
                email_confirm=True,
                user_metadata=metadata,
            )
        except AuthProviderError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to create user account: {e}") from e

    async def _save_profile(
        self,
        user_id: str,
        email: str,
        full_name: str | None,
        phone_number: str | None = None,
    ) -> UserModel | None:
        """Upsert the profile in a savepoint; failure is logged, not raised."""
        try:
            async with self.session.begin_nested():
                return await self.user_repo.upsert_profile(
                    user_id=user_id,
                    email=email,
                    full_name=full_name,
                    phone_number=phone_number,
                )
        except SQLAlchemyError as e:
            logger.error("Failed to save user profile", user_id=user_id, error=str(e))
            return None

    async def redeem(
        self,
        email: str,
        password: str,
        full_name: str | None,
        token: str,
        phone_number: str | None = None,
    ) -> RedeemedUser:
        """Redeem an invitation and activate the account.

        Args:
            email: Invitee email address.
            password: New account password.
            full_name: Display name for the profile.
            token: Invitation token.
            phone_number: Optional contact number.

        Returns:
            The activated user.

        Raises:
            ValidationError: If a required field is missing or the password is too short.
            InvalidTokenError: If the invitation is not pending or has expired.
            UpstreamError: If the account could not be stored.
        """
        email = normalize_email(email)
        token = (token or "").strip()
        if not email or not password:
            raise ValidationError("Email and password are required")
        if not token:
            raise ValidationError("Registration token is required")
        self._check_password(password)

        invitation = await self.invitation_repo.find_by_email_and_token(
            email, token, status=InvitationStatus.PENDING
        )
        if invitation is None or is_expired(invitation.expires_at):
            raise InvalidTokenError(
                "Invalid or expired invitation. Please request a new invitation.",
                status_code=403,
            )

        auth_user = await self._claim_account(email, password, full_name)
        await self._save_profile(auth_user.id, email, full_name, phone_number)

        try:
            await self.invitation_repo.mark_completed(invitation)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to complete registration: {e}") from e

        logger.info("Invitation redeemed", invitation_id=invitation.id, user_id=auth_user.id)
        return RedeemedUser(
            id=auth_user.id,
            email=email,
            full_name=full_name,
            phone_number=phone_number,
        )

    async def signup_with_invite(
        self,
        email: str,
        password: str,
        full_name: str,
        token: str,
        tag_id: str,
    ) -> SignupResult:
        """Redeem a tag-scoped invitation and assign the tag to the new user.

        Profile creation and tag assignment are best effort; the account and
        the completed invitation are what must succeed.

        Raises:
            ValidationError: If a field is missing or the tag does not exist.
            InvalidTokenError: If the invitation is not pending or has expired.
            UpstreamError: If the account could not be stored.
        """
        email = normalize_email(email)
        token = (token or "").strip()
        if not all([email, password, full_name, token, tag_id]):
            raise ValidationError("All fields are required")
        self._check_password(password)

        invitation = await self.invitation_repo.find_by_email_and_token(
            email, token, status=InvitationStatus.PENDING
        )
        if invitation is None:
            raise InvalidTokenError("Invalid invitation")
        if is_expired(invitation.expires_at):
            raise InvalidTokenError("Invitation has expired")

        tag = await self._require_tag(tag_id, "Invalid tag")

        auth_user = await self._claim_account(email, password, full_name)
        profile = await self._save_profile(auth_user.id, email, full_name)

        if profile is not None:
            try:
                async with self.session.begin_nested():
                    await self.tag_repo.add_user_tag(auth_user.id, tag.id)
            except SQLAlchemyError as e:
                logger.error("Failed to assign tag", user_id=auth_user.id, error=str(e))

        try:
            await self.invitation_repo.mark_completed(invitation)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to complete registration: {e}") from e

        logger.info("Signup with invite completed", user_id=auth_user.id, tag_id=tag.id)
        return SignupResult(
            user=RedeemedUser(id=auth_user.id, email=email, full_name=full_name),
            profile=profile,
            tag=tag,
        )

    async def list_pending(self) -> list[InvitationModel]:
        """List pending invitations, newest first."""
        return await self.invitation_repo.list_pending()

    async def delete(self, invitation_id: str | None) -> None:
        """Delete an invitation by ID.

        Raises:
            ValidationError: If no ID was given.
            NotFoundError: If the invitation does not exist.
        """
        if not invitation_id:
            raise ValidationError("Invitation ID is required")
        deleted = await self.invitation_repo.delete(invitation_id)
        if not deleted:
            raise NotFoundError("Invitation not found")
        await self.session.commit()
        logger.info("Invitation deleted", invitation_id=invitation_id)

    def _check_password(self, password: str) -> None:
        min_length = self.settings.min_password_length
        if len(password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters long")
