"""Proposal authoring.

Creating or editing a proposal validates the campaign window and the
audience first, then normalizes the rich-text content, writes the proposal
and its visibility rows in one transaction, and finally fires notifications
and announcement emails as a non-fatal side channel.
"""

import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.config import Settings, get_settings
from collabportal.core.logging import get_logger
from collabportal.domain.entities.proposal import (
    ProposalDraft,
    build_document,
    validate_campaign_dates,
)
from collabportal.domain.exceptions import NotFoundError, UpstreamError, ValidationError
from collabportal.domain.services.content_normalizer import ContentNormalizer
from collabportal.domain.services.notification_service import NotificationService
from collabportal.domain.services.visibility_service import (
    VisibilityService,
    ensure_selection,
)
from collabportal.infrastructure.persistence.models import ProposalModel
from collabportal.infrastructure.persistence.models.proposal import DATE_CHECK_CONSTRAINT
from collabportal.infrastructure.persistence.repositories import (
    ProposalRepository,
    UserRepository,
)
from collabportal.infrastructure.services.email_service import EmailService
from collabportal.infrastructure.storage import StorageError, StorageProvider

logger = get_logger(__name__)

DATE_RANGE_MESSAGE = "Invalid date range. End date must be after start date."
ALLOWED_LOGO_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp", "image/svg+xml"}


def is_date_check_violation(error: Exception) -> bool:
    """Whether a store error is the campaign date CHECK constraint."""
    return DATE_CHECK_CONSTRAINT in str(getattr(error, "orig", error))


@dataclass
class EmailSendResult:
    """Outcome of announcing a proposal to one user."""

    user_id: str
    email: str | None
    success: bool
    error: str | None = None


class ProposalService:
    """Service for creating, editing and deleting proposals."""

    def __init__(
        self,
        session: AsyncSession,
        proposal_repo: ProposalRepository,
        user_repo: UserRepository,
        visibility_service: VisibilityService,
        normalizer: ContentNormalizer,
        notification_service: NotificationService,
        email_service: EmailService,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the proposal service.

        Args:
            session: SQLAlchemy async session.
            proposal_repo: Repository for proposals.
            user_repo: Repository for user profiles.
            visibility_service: Computes and stores the audience.
            normalizer: Moves inline images to object storage.
            notification_service: Side-channel notifications.
            email_service: Side-channel announcement emails.
            settings: Application settings.
        """
        self.session = session
        self.proposal_repo = proposal_repo
        self.user_repo = user_repo
        self.visibility_service = visibility_service
        self.normalizer = normalizer
        self.notification_service = notification_service
        self.email_service = email_service
        self.settings = settings or get_settings()

    async def _resolve_audience(self, draft: ProposalDraft) -> list[str]:
        selected = await self.visibility_service.resolve_selection(draft.user_ids, draft.tag_ids)
        existing = await self.user_repo.existing_ids(selected)
        unknown = [user_id for user_id in selected if user_id not in existing]
        if unknown:
            raise ValidationError(f"Unknown user IDs: {', '.join(unknown)}")
        return selected

    async def _normalized_bodies(self, draft: ProposalDraft) -> tuple[str, str | None]:
        content_html = await self.normalizer.normalize(draft.content_html)
        email_body = draft.email_template_body
        if email_body:
            email_body = await self.normalizer.normalize(email_body, prefix="email-template-images")
        return content_html, email_body

    async def _store_error(self, error: SQLAlchemyError, action: str) -> Exception:
        """Roll back and translate a store failure."""
        await self.session.rollback()
        if isinstance(error, IntegrityError) and is_date_check_violation(error):
            return ValidationError(DATE_RANGE_MESSAGE)
        return UpstreamError(f"Failed to {action} proposal: {error}")

    async def create(self, draft: ProposalDraft, admin_id: str) -> ProposalModel:
        """Create a proposal visible to the selected users.

        Args:
            draft: Proposal fields and audience.
            admin_id: Authoring admin.

        Returns:
            The created proposal.

        Raises:
            ValidationError: If the dates or the audience are invalid.
            UpstreamError: If the proposal could not be stored.
        """
        validate_campaign_dates(draft.campaign_start_date, draft.campaign_end_date)
        ensure_selection(draft.user_ids or draft.tag_ids)

        selected = await self._resolve_audience(draft)
        content_html, email_body = await self._normalized_bodies(draft)

        proposal = ProposalModel(
            id=str(uuid.uuid4()),
            title=draft.title.strip(),
            company_name=draft.company_name.strip(),
            campaign_start_date=draft.campaign_start_date,
            campaign_end_date=draft.campaign_end_date,
            short_description=draft.short_description or "",
            content=build_document(content_html),
            disclaimer=draft.disclaimer,
            email_template_body=email_body,
            logo_url=draft.logo_url,
            created_by=admin_id,
        )
        try:
            await self.proposal_repo.create(proposal)
            await self.visibility_service.apply_on_create(proposal.id, selected)
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(e, "create") from e

        logger.info(
            "Proposal created",
            proposal_id=proposal.id,
            admin_id=admin_id,
            audience=len(selected),
        )

        await self.notification_service.notify_new_proposal(proposal, selected)
        if proposal.email_template_body and proposal.email_template_body.strip():
            await self.send_available_emails(proposal, selected)
        return proposal

    async def update(self, proposal_id: str, draft: ProposalDraft) -> ProposalModel:
        """Edit a proposal and replace its audience.

        Users added to the audience are notified (and emailed when the
        proposal has an email body); users removed lose their unread
        notifications for it.

        Raises:
            ValidationError: If the dates or the audience are invalid.
            NotFoundError: If the proposal does not exist.
            UpstreamError: If the proposal could not be stored.
        """
        validate_campaign_dates(
            draft.campaign_start_date, draft.campaign_end_date, reject_past_start=True
        )
        ensure_selection(draft.user_ids or draft.tag_ids)

        proposal = await self.proposal_repo.get_by_id(proposal_id)
        if proposal is None:
            raise NotFoundError("Proposal not found")

        selected = await self._resolve_audience(draft)
        content_html, email_body = await self._normalized_bodies(draft)

        proposal.title = draft.title.strip()
        proposal.company_name = draft.company_name.strip()
        proposal.campaign_start_date = draft.campaign_start_date
        proposal.campaign_end_date = draft.campaign_end_date
        proposal.short_description = draft.short_description or ""
        proposal.content = build_document(content_html)
        proposal.disclaimer = draft.disclaimer
        proposal.email_template_body = email_body
        if draft.logo_url is not None:
            proposal.logo_url = draft.logo_url

        try:
            await self.proposal_repo.update(proposal)
            old_ids, new_ids = await self.visibility_service.replace(proposal.id, selected)
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(e, "update") from e

        logger.info("Proposal updated", proposal_id=proposal.id, audience=len(new_ids))

        await self.notification_service.notify_visibility_update(proposal, old_ids, new_ids)
        added = sorted(new_ids - old_ids)
        if added and proposal.email_template_body and proposal.email_template_body.strip():
            await self.send_available_emails(proposal, added)
        return proposal

    async def delete(self, proposal_id: str) -> None:
        """Delete a proposal with its responses, chats and notifications."""
        try:
            deleted = await self.proposal_repo.delete_cascade(proposal_id)
            if deleted:
                await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(e, "delete") from e
        if not deleted:
            raise NotFoundError("Proposal not found")
        logger.info("Proposal deleted", proposal_id=proposal_id)

    async def get(self, proposal_id: str) -> ProposalModel:
        """Get a proposal by ID."""
        proposal = await self.proposal_repo.get_by_id(proposal_id)
        if proposal is None:
            raise NotFoundError("Proposal not found")
        return proposal

    async def get_for_user(self, proposal_id: str, user_id: str) -> ProposalModel:
        """Get a proposal the user is allowed to see.

        Hidden proposals are reported as missing.
        """
        if not await self.visibility_service.is_visible(proposal_id, user_id):
            raise NotFoundError("Proposal not found")
        return await self.get(proposal_id)

    async def list_all(self) -> list[ProposalModel]:
        """List all proposals, newest first."""
        return await self.proposal_repo.list_all()

    async def list_for_user(self, user_id: str) -> list[ProposalModel]:
        """List the proposals a user can see, newest first."""
        return await self.proposal_repo.list_visible_to(user_id)

    async def audience(self, proposal_id: str) -> set[str]:
        """IDs of the users who can see a proposal."""
        return await self.visibility_service.user_ids_for(proposal_id)

    async def send_available_emails(
        self, proposal: ProposalModel, user_ids: list[str] | None = None
    ) -> list[EmailSendResult]:
        """Email the proposal announcement to users.

        Args:
            proposal: Proposal being announced.
            user_ids: Recipients, defaults to everyone who can see the proposal.

        Returns:
            One result per recipient. Failures are reported, never raised.
        """
        if user_ids is None:
            user_ids = sorted(await self.audience(proposal.id))

        results: list[EmailSendResult] = []
        try:
            users = {user.id: user for user in await self.user_repo.list_by_ids(user_ids)}
        except SQLAlchemyError as e:
            logger.error("Failed to load email recipients", proposal_id=proposal.id, error=str(e))
            return [EmailSendResult(user_id, None, False, "User lookup failed") for user_id in user_ids]

        for user_id in user_ids:
            user = users.get(user_id)
            if user is None:
                results.append(EmailSendResult(user_id, None, False, "User not found"))
                continue
            first_name = user.full_name.split()[0] if user.full_name and user.full_name.strip() else "there"
            sent = await self.email_service.send_proposal_available_email(
                to=user.email,
                first_name=first_name,
                proposal_id=proposal.id,
                proposal_title=proposal.title,
                company_name=proposal.company_name,
                body=proposal.email_template_body or "",
            )
            results.append(
                EmailSendResult(user_id, user.email, sent, None if sent else "Failed to send email")
            )

        logger.info(
            "Proposal announcement emails processed",
            proposal_id=proposal.id,
            sent=sum(1 for r in results if r.success),
            failed=sum(1 for r in results if not r.success),
        )
        return results

    async def upload_logo(
        self, storage: StorageProvider, filename: str, content: bytes, content_type: str
    ) -> str:
        """Store a company logo and return its public URL.

        Raises:
            ValidationError: If the file is not an accepted image or too large.
            UpstreamError: If the upload failed.
        """
        if content_type not in ALLOWED_LOGO_TYPES:
            raise ValidationError("Logo must be a PNG, JPEG, GIF, WebP or SVG image")
        if not content:
            raise ValidationError("Logo file is empty")
        if len(content) > self.settings.max_image_size:
            raise ValidationError(
                f"Logo exceeds the maximum size of {self.settings.max_image_size} bytes"
            )

        ext = PurePosixPath(filename or "").suffix.lower().lstrip(".") or content_type.split("/")[1]
        if ext == "svg+xml":
            ext = "svg"
        key = f"{uuid.uuid4().hex}.{ext}"
        try:
            stored = await storage.upload(self.settings.logo_bucket, key, content, content_type)
        except StorageError as e:
            raise UpstreamError(f"Failed to upload logo: {e}") from e
        logger.info("Logo uploaded", key=key, size=stored.size)
        return stored.url
