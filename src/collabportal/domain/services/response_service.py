"""Response and admin-review workflow.

Users accept or decline proposals they can see; admins review responses,
ask for updates, approve them (the campaign goes live) and finally mark the
campaign completed. Chat messages that belong to a transition are written
in the same transaction; notifications go out afterwards and never fail
the action.
"""

import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.logging import get_logger
from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.notification import NotificationType
from collabportal.domain.entities.response import (
    ADMIN_REPLY_NOTIFICATION_TITLE,
    AdminResponseStatus,
    PaymentMethod,
    ProgressStatus,
    ResponseStatus,
    can_edit,
    decline_message,
    derive_progress,
    effective_admin_status,
    should_prompt_review,
)
from collabportal.domain.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamError,
    ValidationError,
)
from collabportal.domain.services.chat_service import ChatService
from collabportal.domain.services.notification_service import NotificationService, proposal_link
from collabportal.domain.services.visibility_service import VisibilityService
from collabportal.infrastructure.persistence.models import (
    AdminResponseModel,
    ProposalModel,
    ResponseModel,
)
from collabportal.infrastructure.persistence.repositories import (
    ProposalRepository,
    ResponseRepository,
    UserRepository,
)

logger = get_logger(__name__)

REVIEW_STATUSES = (AdminResponseStatus.APPROVED, AdminResponseStatus.REJECTED)


@dataclass
class AcceptTerms:
    """What a user offers when accepting a proposal."""

    quote: float | None
    proposed_publish_date: date | None
    platforms: list[str]
    payment_method: PaymentMethod | None
    message: str | None = None
    disclaimer_accepted: bool = False


@dataclass
class ResponseView:
    """A response with its review state and derived flags."""

    response: ResponseModel
    admin_response: AdminResponseModel | None
    proposal: ProposalModel | None
    effective_status: str | None
    progress: str
    can_edit: bool
    should_prompt_review: bool


def validate_terms(terms: AcceptTerms, proposal: ProposalModel) -> None:
    """Check an acceptance against the proposal.

    Raises:
        ValidationError: On the first rule the terms break.
    """
    if terms.quote is None:
        raise ValidationError("Please enter a project quote")
    if terms.quote <= 0:
        raise ValidationError("Quote must be a positive amount")
    if terms.proposed_publish_date is None:
        raise ValidationError("Please select a publish date")
    if not (
        proposal.campaign_start_date
        <= terms.proposed_publish_date
        <= proposal.campaign_end_date
    ):
        raise ValidationError(
            f"Publish date must be between {proposal.campaign_start_date.isoformat()} "
            f"and {proposal.campaign_end_date.isoformat()}"
        )
    if not [p for p in terms.platforms if p and p.strip()]:
        raise ValidationError("Please select at least one platform")
    if terms.payment_method is None or terms.payment_method == PaymentMethod.NONE:
        raise ValidationError("Please select a payment method")
    if proposal.disclaimer and not terms.disclaimer_accepted:
        raise ValidationError("You must accept the disclaimer to proceed")


def acceptance_summary(terms: AcceptTerms) -> str:
    """Chat message posted when a user accepts without writing one."""
    return (
        f"I have accepted this offer. Quote: {terms.quote:.2f}, "
        f"publish date: {terms.proposed_publish_date.isoformat()}, "
        f"platforms: {', '.join(terms.platforms)}."
    )


class ResponseService:
    """Orchestrates response submission and admin review."""

    def __init__(
        self,
        session: AsyncSession,
        response_repo: ResponseRepository,
        proposal_repo: ProposalRepository,
        user_repo: UserRepository,
        visibility_service: VisibilityService,
        chat_service: ChatService,
        notification_service: NotificationService,
    ) -> None:
        """Initialize the response service.

        Args:
            session: SQLAlchemy async session.
            response_repo: Repository for responses and admin reviews.
            proposal_repo: Repository for proposals.
            user_repo: Repository for user profiles.
            visibility_service: Decides who may respond.
            chat_service: Chat side channel.
            notification_service: Notification side channel.
        """
        self.session = session
        self.response_repo = response_repo
        self.proposal_repo = proposal_repo
        self.user_repo = user_repo
        self.visibility_service = visibility_service
        self.chat_service = chat_service
        self.notification_service = notification_service

    async def _visible_proposal(self, proposal_id: str, user_id: str) -> ProposalModel:
        proposal = await self.proposal_repo.get_by_id(proposal_id)
        if proposal is None or not await self.visibility_service.is_visible(proposal_id, user_id):
            raise NotFoundError("Proposal not found")
        return proposal

    async def _display_name(self, user_id: str) -> str:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return "A user"
        return user.full_name or user.email

    async def _post_chat_quietly(
        self, proposal_id: str, user_id: str, sender_id: str, message: str
    ) -> None:
        try:
            await self.chat_service.append(proposal_id, user_id, sender_id, message)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to post chat message", proposal_id=proposal_id, error=str(e))

    async def _insert_response(self, response: ResponseModel) -> None:
        """Insert a response together with its pending admin review."""
        await self.response_repo.create(response)
        await self.response_repo.save_admin_response(
            AdminResponseModel(
                id=str(uuid.uuid4()),
                response_id=response.id,
                status=AdminResponseStatus.PENDING.value,
            )
        )

    async def _save_new_response(self, response: ResponseModel, chat_message: str | None = None) -> None:
        """Insert a response, its pending review and an optional chat message, then commit."""
        try:
            await self._insert_response(response)
            if chat_message:
                await self.chat_service.append(
                    response.proposal_id, response.user_id, response.user_id, chat_message
                )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("You have already responded to this proposal") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to save response: {e}") from e

    async def accept(
        self,
        proposal_id: str,
        user_id: str,
        quote: float | None,
        proposed_publish_date: date | None,
        platforms: list[str],
        payment_method: PaymentMethod | None,
        message: str | None = None,
        disclaimer_accepted: bool = False,
    ) -> ResponseModel:
        """Accept a proposal.

        Args:
            proposal_id: Proposal being accepted.
            user_id: Responding user.
            quote: Quoted price.
            proposed_publish_date: Date within the campaign window.
            platforms: Platforms the content will be published on.
            payment_method: Payment preference.
            message: Optional note for the chat.
            disclaimer_accepted: Whether the proposal's disclaimer was accepted.

        Returns:
            The created response.

        Raises:
            NotFoundError: If the proposal does not exist or is hidden from the user.
            ValidationError: If the terms are incomplete or out of range.
            ConflictError: If the user already responded.
        """
        terms = AcceptTerms(
            quote=quote,
            proposed_publish_date=proposed_publish_date,
            platforms=list(platforms or []),
            payment_method=payment_method,
            message=message,
            disclaimer_accepted=disclaimer_accepted,
        )
        proposal = await self._visible_proposal(proposal_id, user_id)
        validate_terms(terms, proposal)
        if await self.response_repo.get_for_user(proposal_id, user_id) is not None:
            raise ConflictError("You have already responded to this proposal")

        response = ResponseModel(
            id=str(uuid.uuid4()),
            proposal_id=proposal_id,
            user_id=user_id,
            status=ResponseStatus.ACCEPTED.value,
            progress_status=ProgressStatus.ACCEPTED.value,
            quote=terms.quote,
            platforms=terms.platforms,
            payment_method=PaymentMethod(terms.payment_method).value,
            proposed_publish_date=terms.proposed_publish_date,
            message=(message or "").strip() or None,
            disclaimer_accepted=terms.disclaimer_accepted,
        )
        await self._save_new_response(response)
        logger.info("Proposal accepted", response_id=response.id, proposal_id=proposal_id)

        await self._post_chat_quietly(
            proposal_id, user_id, user_id, (message or "").strip() or acceptance_summary(terms)
        )
        name = await self._display_name(user_id)
        await self.notification_service.notify_admins(
            title="New response received",
            message=f'{name} accepted "{proposal.title}"',
            link_url=f"/admin/response/{response.id}",
            related_proposal_id=proposal_id,
            related_response_id=response.id,
        )
        return response

    async def decline(self, proposal_id: str, user_id: str, reason: str) -> ResponseModel:
        """Decline a proposal.

        The decline reason is posted to the proposal chat in the same
        transaction, so a rejected response always has that message.

        Raises:
            ValidationError: If no reason was given.
            NotFoundError: If the proposal does not exist or is hidden from the user.
            ConflictError: If the user already responded.
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please provide a reason for declining")
        proposal = await self._visible_proposal(proposal_id, user_id)
        if await self.response_repo.get_for_user(proposal_id, user_id) is not None:
            raise ConflictError("You have already responded to this proposal")

        response = ResponseModel(
            id=str(uuid.uuid4()),
            proposal_id=proposal_id,
            user_id=user_id,
            status=ResponseStatus.REJECTED.value,
            progress_status=ProgressStatus.NO_RESPONSE.value,
            quote=None,
            platforms=[],
            payment_method=PaymentMethod.NONE.value,
            message=reason,
        )
        await self._save_new_response(response, chat_message=decline_message(reason))
        logger.info("Proposal declined", response_id=response.id, proposal_id=proposal_id)

        name = await self._display_name(user_id)
        await self.notification_service.notify_admins(
            title="Proposal declined",
            message=f'{name} declined "{proposal.title}": {reason}',
            link_url=f"/admin/response/{response.id}",
            related_proposal_id=proposal_id,
            related_response_id=response.id,
        )
        return response

    async def resubmit(
        self,
        response_id: str,
        user_id: str,
        accept: bool,
        quote: float | None = None,
        proposed_publish_date: date | None = None,
        platforms: list[str] | None = None,
        payment_method: PaymentMethod | None = None,
        message: str | None = None,
        reason: str | None = None,
        disclaimer_accepted: bool = False,
    ) -> ResponseModel:
        """Change a response while it is still editable.

        Sends the admin review back to ``pending``.

        Raises:
            NotFoundError: If the response does not exist or is not the user's.
            PermissionDeniedError: If the response can no longer be edited.
            ValidationError: If the new terms or the reason are invalid.
        """
        response = await self.response_repo.get_by_id(response_id)
        if response is None or response.user_id != user_id:
            raise NotFoundError("Response not found")
        admin_response = await self.response_repo.get_admin_response(response_id)
        admin_status = admin_response.status if admin_response else None
        if not can_edit(admin_status, response.status):
            raise PermissionDeniedError("This response can no longer be edited")

        proposal = await self.proposal_repo.get_by_id(response.proposal_id)
        if proposal is None:
            raise NotFoundError("Proposal not found")

        chat_message: str | None = None
        if accept:
            terms = AcceptTerms(
                quote=quote,
                proposed_publish_date=proposed_publish_date,
                platforms=list(platforms or []),
                payment_method=payment_method,
                message=message,
                disclaimer_accepted=disclaimer_accepted,
            )
            validate_terms(terms, proposal)
            response.status = ResponseStatus.ACCEPTED.value
            response.progress_status = ProgressStatus.ACCEPTED.value
            response.quote = terms.quote
            response.platforms = terms.platforms
            response.payment_method = PaymentMethod(terms.payment_method).value
            response.proposed_publish_date = terms.proposed_publish_date
            response.disclaimer_accepted = terms.disclaimer_accepted
            response.message = (message or "").strip() or None
        else:
            reason = (reason or "").strip()
            if not reason:
                raise ValidationError("Please provide a reason for declining")
            response.status = ResponseStatus.REJECTED.value
            response.progress_status = ProgressStatus.NO_RESPONSE.value
            response.quote = None
            response.platforms = []
            response.payment_method = PaymentMethod.NONE.value
            response.proposed_publish_date = None
            response.message = reason
            chat_message = decline_message(reason)

        try:
            await self.response_repo.update(response)
            if admin_response is not None:
                admin_response.status = AdminResponseStatus.PENDING.value
            else:
                admin_response = AdminResponseModel(
                    id=str(uuid.uuid4()),
                    response_id=response.id,
                    status=AdminResponseStatus.PENDING.value,
                )
            await self.response_repo.save_admin_response(admin_response)
            if chat_message:
                await self.chat_service.append(response.proposal_id, user_id, user_id, chat_message)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to update response: {e}") from e

        logger.info("Response resubmitted", response_id=response.id, status=response.status)

        if accept and message and message.strip():
            await self._post_chat_quietly(response.proposal_id, user_id, user_id, message.strip())
        name = await self._display_name(user_id)
        await self.notification_service.notify_admins(
            title="Response updated",
            message=f'{name} updated their response to "{proposal.title}"',
            link_url=f"/admin/response/{response.id}",
            related_proposal_id=response.proposal_id,
            related_response_id=response.id,
        )
        return response

    async def review(
        self,
        response_id: str,
        admin_id: str,
        status: AdminResponseStatus,
        message: str | None = None,
        request_update: bool = False,
    ) -> ResponseView:
        """Record an admin's review of a response.

        Args:
            response_id: Response under review.
            admin_id: Reviewing admin.
            status: ``approved`` or ``rejected``.
            message: Optional reply posted to the chat.
            request_update: Ask the user to revise the response.

        Returns:
            The reviewed response view.

        Raises:
            ValidationError: If the status is not a review outcome.
            NotFoundError: If the response does not exist.
        """
        status = AdminResponseStatus(status)
        if status not in REVIEW_STATUSES:
            raise ValidationError("Review status must be approved or rejected")

        response = await self.response_repo.get_by_id(response_id)
        if response is None:
            raise NotFoundError("Response not found")

        admin_response = await self.response_repo.get_admin_response(response_id)
        existed = admin_response is not None
        if admin_response is None:
            admin_response = AdminResponseModel(id=str(uuid.uuid4()), response_id=response.id)
        admin_response.status = status.value
        admin_response.reviewed_by = admin_id

        if status == AdminResponseStatus.APPROVED:
            response.progress_status = ProgressStatus.LIVE.value
            response.admin_approved_at = utcnow()
        if request_update and existed:
            response.status = ResponseStatus.PENDING_UPDATE.value

        message = (message or "").strip()
        try:
            await self.response_repo.save_admin_response(admin_response)
            await self.response_repo.update(response)
            if message:
                await self.chat_service.append(response.proposal_id, response.user_id, admin_id, message)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to save review: {e}") from e

        logger.info(
            "Response reviewed",
            response_id=response.id,
            status=status.value,
            request_update=request_update,
        )

        proposal = await self.proposal_repo.get_by_id(response.proposal_id)
        title = proposal.title if proposal else "your proposal"
        await self.notification_service.notify_user(
            recipient_id=response.user_id,
            title=ADMIN_REPLY_NOTIFICATION_TITLE,
            message=f'Your response to "{title}" was {status.value}',
            type=NotificationType.ACTION,
            link_url=proposal_link(response.proposal_id),
            related_proposal_id=response.proposal_id,
            related_response_id=response.id,
        )
        return self._view(response, admin_response, proposal)

    async def complete(self, response_id: str) -> ResponseView:
        """Mark a campaign completed.

        Also clears the user's unread admin-reply notifications for the
        response.

        Raises:
            NotFoundError: If the response does not exist.
        """
        response = await self.response_repo.get_by_id(response_id)
        if response is None:
            raise NotFoundError("Response not found")
        admin_response = await self.response_repo.get_admin_response(response_id)

        response.progress_status = ProgressStatus.COMPLETED.value
        response.campaign_completed_at = utcnow()
        if admin_response is None:
            admin_response = AdminResponseModel(id=str(uuid.uuid4()), response_id=response.id)
        admin_response.status = AdminResponseStatus.COMPLETED.value

        try:
            await self.response_repo.update(response)
            await self.response_repo.save_admin_response(admin_response)
            cleared = await self.notification_service.clear_admin_replies(response.id, response.user_id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise UpstreamError(f"Failed to complete campaign: {e}") from e

        logger.info("Campaign completed", response_id=response.id, notifications_cleared=cleared)
        proposal = await self.proposal_repo.get_by_id(response.proposal_id)
        return self._view(response, admin_response, proposal)

    def _view(
        self,
        response: ResponseModel,
        admin_response: AdminResponseModel | None,
        proposal: ProposalModel | None,
    ) -> ResponseView:
        admin_status = admin_response.status if admin_response else None
        return ResponseView(
            response=response,
            admin_response=admin_response,
            proposal=proposal,
            effective_status=effective_admin_status(response.progress_status, admin_status),
            progress=derive_progress(
                response.status,
                response.progress_status,
                admin_status,
                proposal.campaign_end_date if proposal else None,
            ),
            can_edit=can_edit(admin_status, response.status),
            should_prompt_review=should_prompt_review(admin_status, response.status),
        )

    async def _views(self, responses: list[ResponseModel]) -> list[ResponseView]:
        admin_responses = await self.response_repo.admin_responses_for([r.id for r in responses])
        proposals: dict[str, ProposalModel | None] = {}
        for response in responses:
            if response.proposal_id not in proposals:
                proposals[response.proposal_id] = await self.proposal_repo.get_by_id(
                    response.proposal_id
                )
        return [
            self._view(r, admin_responses.get(r.id), proposals[r.proposal_id]) for r in responses
        ]

    async def get_view(self, response_id: str, user_id: str | None = None) -> ResponseView:
        """Get one response with its derived flags.

        Args:
            response_id: Response to load.
            user_id: When given, the response must belong to this user.

        Raises:
            NotFoundError: If the response does not exist or is not the user's.
        """
        response = await self.response_repo.get_by_id(response_id)
        if response is None or (user_id is not None and response.user_id != user_id):
            raise NotFoundError("Response not found")
        return (await self._views([response]))[0]

    async def list_for_admin(self, proposal_id: str | None = None) -> list[ResponseView]:
        """List all responses, optionally for one proposal."""
        return await self._views(await self.response_repo.list_all(proposal_id))

    async def list_for_user(self, user_id: str) -> list[ResponseView]:
        """List a user's responses."""
        return await self._views(await self.response_repo.list_by_user(user_id))
