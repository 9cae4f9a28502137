"""In-app notifications.

Notifications are a side channel: the ``notify_*`` methods run after the
primary write has been committed, commit on their own, and log and swallow
store failures so the action that triggered them still succeeds.
"""

import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.logging import get_logger
from collabportal.domain.entities.notification import NotificationType
from collabportal.domain.entities.response import ADMIN_REPLY_NOTIFICATION_TITLE
from collabportal.domain.entities.user import UserRole
from collabportal.domain.exceptions import NotFoundError
from collabportal.infrastructure.persistence.models import NotificationModel, ProposalModel
from collabportal.infrastructure.persistence.repositories import (
    NotificationRepository,
    UserRepository,
)

logger = get_logger(__name__)

NEW_PROPOSAL_TITLE = "New proposal available"


def proposal_link(proposal_id: str) -> str:
    """Dashboard path of a proposal."""
    return f"/dashboard/proposal/{proposal_id}"


class NotificationService:
    """Creates and reads in-app notifications."""

    def __init__(
        self,
        session: AsyncSession,
        notification_repo: NotificationRepository,
        user_repo: UserRepository,
    ) -> None:
        self.session = session
        self.notification_repo = notification_repo
        self.user_repo = user_repo

    async def _deliver(self, notifications: list[NotificationModel], event: str) -> int:
        if not notifications:
            return 0
        try:
            await self.notification_repo.add_many(notifications)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to create notifications", notification_event=event, error=str(e))
            return 0
        logger.debug("Notifications created", notification_event=event, count=len(notifications))
        return len(notifications)

    @staticmethod
    def _build(
        recipient_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        link_url: str | None = None,
        related_proposal_id: str | None = None,
        related_response_id: str | None = None,
    ) -> NotificationModel:
        return NotificationModel(
            id=str(uuid.uuid4()),
            recipient_id=recipient_id,
            title=title,
            message=message,
            type=type.value,
            link_url=link_url,
            related_proposal_id=related_proposal_id,
            related_response_id=related_response_id,
            is_read=False,
        )

    def _new_proposal(self, proposal: ProposalModel, user_id: str) -> NotificationModel:
        return self._build(
            recipient_id=user_id,
            title=NEW_PROPOSAL_TITLE,
            message=f"{proposal.company_name}: {proposal.title}",
            type=NotificationType.ACTION,
            link_url=proposal_link(proposal.id),
            related_proposal_id=proposal.id,
        )

    async def notify_new_proposal(self, proposal: ProposalModel, user_ids: list[str]) -> int:
        """Tell every selected user about a new proposal.

        Returns:
            Number of notifications created.
        """
        notifications = [self._new_proposal(proposal, user_id) for user_id in dict.fromkeys(user_ids)]
        return await self._deliver(notifications, "new_proposal")

    async def notify_visibility_update(
        self, proposal: ProposalModel, old_ids: set[str], new_ids: set[str]
    ) -> int:
        """Reconcile notifications after a proposal's visibility changed.

        Added users are told about the proposal; users who lost access have
        their unread notifications for it removed.

        Args:
            proposal: The edited proposal.
            old_ids: Users who could see it before the edit.
            new_ids: Users who can see it now.

        Returns:
            Number of notifications created.
        """
        removed = sorted(old_ids - new_ids)
        if removed:
            try:
                deleted = await self.notification_repo.delete_unread(
                    removed, related_proposal_id=proposal.id
                )
                await self.session.commit()
                logger.debug("Stale notifications removed", proposal_id=proposal.id, count=deleted)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to remove stale notifications",
                    proposal_id=proposal.id,
                    error=str(e),
                )

        added = sorted(new_ids - old_ids)
        notifications = [self._new_proposal(proposal, user_id) for user_id in added]
        return await self._deliver(notifications, "visibility_update")

    async def notify_admins(
        self,
        title: str,
        message: str,
        link_url: str | None = None,
        related_proposal_id: str | None = None,
        related_response_id: str | None = None,
    ) -> int:
        """Send the same notification to every admin."""
        try:
            admins = await self.user_repo.list_by_role(UserRole.ADMIN)
        except SQLAlchemyError as e:
            logger.error("Failed to load admins for notification", error=str(e))
            return 0
        notifications = [
            self._build(
                recipient_id=admin.id,
                title=title,
                message=message,
                type=NotificationType.ACTION,
                link_url=link_url,
                related_proposal_id=related_proposal_id,
                related_response_id=related_response_id,
            )
            for admin in admins
        ]
        return await self._deliver(notifications, "admin")

    async def notify_user(
        self,
        recipient_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        link_url: str | None = None,
        related_proposal_id: str | None = None,
        related_response_id: str | None = None,
    ) -> int:
        """Send one notification to one user."""
        notification = self._build(
            recipient_id=recipient_id,
            title=title,
            message=message,
            type=type,
            link_url=link_url,
            related_proposal_id=related_proposal_id,
            related_response_id=related_response_id,
        )
        return await self._deliver([notification], "user")

    async def clear_admin_replies(self, response_id: str, user_id: str) -> int:
        """Remove the user's unread admin-reply notifications for a response.

        Runs in the caller's transaction.
        """
        return await self.notification_repo.delete_unread(
            [user_id],
            related_response_id=response_id,
            title=ADMIN_REPLY_NOTIFICATION_TITLE,
        )

    async def list_for(self, user_id: str, unread_only: bool = False) -> list[NotificationModel]:
        """List a user's notifications, newest first."""
        return await self.notification_repo.list_for(user_id, unread_only=unread_only)

    async def mark_read(self, notification_id: str, user_id: str) -> None:
        """Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or is not theirs.
        """
        if not await self.notification_repo.mark_read(notification_id, user_id):
            raise NotFoundError("Notification not found")
        await self.session.commit()
