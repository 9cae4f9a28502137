"""Notification repository."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.infrastructure.persistence.models import NotificationModel


class NotificationRepository:
    """Repository for in-app notifications."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add_many(self, notifications: list[NotificationModel]) -> None:
        """Persist a batch of notifications."""
        self.session.add_all(notifications)
        await self.session.flush()

    async def list_for(self, recipient_id: str, unread_only: bool = False) -> list[NotificationModel]:
        """List a recipient's notifications, newest first."""
        query = select(NotificationModel).where(NotificationModel.recipient_id == recipient_id)
        if unread_only:
            query = query.where(NotificationModel.is_read.is_(False))
        result = await self.session.execute(query.order_by(NotificationModel.created_at.desc()))
        return list(result.scalars().all())

    async def mark_read(self, notification_id: str, recipient_id: str) -> bool:
        """Mark one of the recipient's notifications as read."""
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
            .values(is_read=True)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def delete_unread(
        self,
        recipient_ids: list[str],
        related_proposal_id: str | None = None,
        related_response_id: str | None = None,
        title: str | None = None,
    ) -> int:
        """Delete unread notifications matching the given filters.

        Returns:
            Number of deleted notifications.
        """
        if not recipient_ids:
            return 0
        stmt = delete(NotificationModel).where(
            NotificationModel.recipient_id.in_(recipient_ids),
            NotificationModel.is_read.is_(False),
        )
        if related_proposal_id is not None:
            stmt = stmt.where(NotificationModel.related_proposal_id == related_proposal_id)
        if related_response_id is not None:
            stmt = stmt.where(NotificationModel.related_response_id == related_response_id)
        if title is not None:
            stmt = stmt.where(NotificationModel.title == title)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
