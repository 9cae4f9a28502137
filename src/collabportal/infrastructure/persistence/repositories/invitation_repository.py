"""Invitation repository for database operations."""

from datetime import datetime

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.invitation import InvitationStatus
from collabportal.infrastructure.persistence.models import InvitationModel


class InvitationRepository:
    """Repository for invitation database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, invitation: InvitationModel) -> InvitationModel:
        """Create a new invitation.

        Args:
            invitation: Invitation model to create.

        Returns:
            Created invitation model.
        """
        self.session.add(invitation)
        await self.session.flush()
        return invitation

    async def get_by_id(self, invitation_id: str) -> InvitationModel | None:
        """Get an invitation by ID.

        Args:
            invitation_id: Invitation ID (UUID string).

        Returns:
            Invitation model if found, None otherwise.
        """
        result = await self.session.execute(
            select(InvitationModel).where(InvitationModel.id == invitation_id)
        )
        return result.scalar_one_or_none()

    async def get_pending_by_email(self, email: str) -> InvitationModel | None:
        """Get the pending invitation for an email, if any.

        Args:
            email: Invitee email address.

        Returns:
            The newest pending invitation, or None.
        """
        result = await self.session.execute(
            select(InvitationModel)
            .where(
                and_(
                    InvitationModel.email == email,
                    InvitationModel.status == InvitationStatus.PENDING.value,
                )
            )
            .order_by(InvitationModel.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_by_email_and_token(
        self, email: str, token: str, status: InvitationStatus | None = None
    ) -> InvitationModel | None:
        """Find an invitation matching an email and token.

        Args:
            email: Invitee email address.
            token: Invitation token.
            status: Optional status filter.

        Returns:
            The newest matching invitation, or None.
        """
        query = select(InvitationModel).where(
            and_(InvitationModel.email == email, InvitationModel.token == token)
        )
        if status is not None:
            query = query.where(InvitationModel.status == status.value)
        query = query.order_by(InvitationModel.created_at.desc()).limit(1)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def reissue(
        self,
        invitation: InvitationModel,
        token: str,
        expires_at: datetime,
        handle_name: str | None,
        tag_id: str | None,
    ) -> InvitationModel:
        """Refresh a pending invitation in place.

        Args:
            invitation: The pending invitation to refresh.
            token: New token.
            expires_at: New expiry.
            handle_name: New handle name.
            tag_id: New tag, kept as-is when None.

        Returns:
            The updated invitation.
        """
        invitation.token = token
        invitation.expires_at = expires_at
        invitation.handle_name = handle_name
        if tag_id is not None:
            invitation.tag_id = tag_id
        invitation.updated_at = utcnow()
        await self.session.flush()
        return invitation

    async def mark_completed(self, invitation: InvitationModel) -> None:
        """Mark an invitation as completed."""
        now = utcnow()
        invitation.status = InvitationStatus.COMPLETED.value
        invitation.completed_at = now
        invitation.updated_at = now
        await self.session.flush()

    async def list_pending(self) -> list[InvitationModel]:
        """List pending invitations, newest first."""
        result = await self.session.execute(
            select(InvitationModel)
            .where(InvitationModel.status == InvitationStatus.PENDING.value)
            .order_by(InvitationModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def delete(self, invitation_id: str) -> bool:
        """Delete an invitation.

        Args:
            invitation_id: ID of the invitation to delete.

        Returns:
            True if the invitation was deleted, False if not found.
        """
        result = await self.session.execute(
            delete(InvitationModel).where(InvitationModel.id == invitation_id)
        )
        await self.session.flush()
        return result.rowcount > 0
