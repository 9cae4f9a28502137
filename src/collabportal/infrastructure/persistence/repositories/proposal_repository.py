"""Proposal and proposal visibility repositories."""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.infrastructure.persistence.models import (
    AdminResponseModel,
    ChatMessageModel,
    ChatModel,
    NotificationModel,
    ProposalModel,
    ProposalVisibilityModel,
    ResponseModel,
)


class ProposalRepository:
    """Repository for proposal operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, proposal: ProposalModel) -> ProposalModel:
        """Persist a new proposal."""
        self.session.add(proposal)
        await self.session.flush()
        return proposal

    async def get_by_id(self, proposal_id: str) -> ProposalModel | None:
        """Get a proposal by ID."""
        result = await self.session.execute(
            select(ProposalModel).where(ProposalModel.id == proposal_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[ProposalModel]:
        """List all proposals, newest first."""
        result = await self.session.execute(
            select(ProposalModel).order_by(ProposalModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_visible_to(self, user_id: str) -> list[ProposalModel]:
        """List proposals a user may see, newest first."""
        result = await self.session.execute(
            select(ProposalModel)
            .join(ProposalVisibilityModel, ProposalVisibilityModel.proposal_id == ProposalModel.id)
            .where(ProposalVisibilityModel.user_id == user_id)
            .order_by(ProposalModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def update(self, proposal: ProposalModel) -> ProposalModel:
        """Flush pending changes to a proposal."""
        await self.session.flush()
        return proposal

    async def delete_cascade(self, proposal_id: str) -> bool:
        """Delete a proposal and everything hanging off it.

        Children go first: chat messages, chats, admin responses, responses,
        notifications and visibility rows.

        Returns:
            True if the proposal existed.
        """
        chat_ids = select(ChatModel.id).where(ChatModel.proposal_id == proposal_id)
        response_ids = select(ResponseModel.id).where(ResponseModel.proposal_id == proposal_id)

        await self.session.execute(
            delete(ChatMessageModel).where(ChatMessageModel.chat_id.in_(chat_ids))
        )
        await self.session.execute(delete(ChatModel).where(ChatModel.proposal_id == proposal_id))
        await self.session.execute(
            delete(AdminResponseModel).where(AdminResponseModel.response_id.in_(response_ids))
        )
        await self.session.execute(
            delete(ResponseModel).where(ResponseModel.proposal_id == proposal_id)
        )
        await self.session.execute(
            delete(NotificationModel).where(NotificationModel.related_proposal_id == proposal_id)
        )
        await self.session.execute(
            delete(ProposalVisibilityModel).where(ProposalVisibilityModel.proposal_id == proposal_id)
        )
        result = await self.session.execute(
            delete(ProposalModel).where(ProposalModel.id == proposal_id)
        )
        await self.session.flush()
        return result.rowcount > 0


class VisibilityRepository:
    """Repository for proposal visibility rows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def user_ids_for(self, proposal_id: str) -> set[str]:
        """Return the users who can see a proposal."""
        result = await self.session.execute(
            select(ProposalVisibilityModel.user_id).where(
                ProposalVisibilityModel.proposal_id == proposal_id
            )
        )
        return set(result.scalars().all())

    async def is_visible(self, proposal_id: str, user_id: str) -> bool:
        """Check whether a user can see a proposal."""
        result = await self.session.execute(
            select(ProposalVisibilityModel.id).where(
                ProposalVisibilityModel.proposal_id == proposal_id,
                ProposalVisibilityModel.user_id == user_id,
            )
        )
        return result.first() is not None

    async def insert_many(self, proposal_id: str, user_ids: list[str]) -> None:
        """Insert one row per user ID."""
        for user_id in user_ids:
            self.session.add(
                ProposalVisibilityModel(
                    id=str(uuid.uuid4()),
                    proposal_id=proposal_id,
                    user_id=user_id,
                )
            )
        await self.session.flush()

    async def delete_all(self, proposal_id: str) -> None:
        """Delete every visibility row of a proposal."""
        await self.session.execute(
            delete(ProposalVisibilityModel).where(ProposalVisibilityModel.proposal_id == proposal_id)
        )
        await self.session.flush()
