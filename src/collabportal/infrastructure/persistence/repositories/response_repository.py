"""Response and admin response repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.infrastructure.persistence.models import AdminResponseModel, ResponseModel


class ResponseRepository:
    """Repository for responses and their admin reviews."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, response: ResponseModel) -> ResponseModel:
        """Persist a new response."""
        self.session.add(response)
        await self.session.flush()
        return response

    async def get_by_id(self, response_id: str) -> ResponseModel | None:
        """Get a response by ID."""
        result = await self.session.execute(
            select(ResponseModel).where(ResponseModel.id == response_id)
        )
        return result.scalar_one_or_none()

    async def get_for_user(self, proposal_id: str, user_id: str) -> ResponseModel | None:
        """Get a user's response to a proposal."""
        result = await self.session.execute(
            select(ResponseModel).where(
                ResponseModel.proposal_id == proposal_id,
                ResponseModel.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self, proposal_id: str | None = None) -> list[ResponseModel]:
        """List responses, optionally for one proposal, newest first."""
        query = select(ResponseModel)
        if proposal_id is not None:
            query = query.where(ResponseModel.proposal_id == proposal_id)
        result = await self.session.execute(query.order_by(ResponseModel.created_at.desc()))
        return list(result.scalars().all())

    async def list_by_user(self, user_id: str) -> list[ResponseModel]:
        """List a user's responses, newest first."""
        result = await self.session.execute(
            select(ResponseModel)
            .where(ResponseModel.user_id == user_id)
            .order_by(ResponseModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def update(self, response: ResponseModel) -> ResponseModel:
        """Flush pending changes to a response."""
        await self.session.flush()
        return response

    async def get_admin_response(self, response_id: str) -> AdminResponseModel | None:
        """Get the admin review of a response."""
        result = await self.session.execute(
            select(AdminResponseModel).where(AdminResponseModel.response_id == response_id)
        )
        return result.scalar_one_or_none()

    async def admin_responses_for(self, response_ids: list[str]) -> dict[str, AdminResponseModel]:
        """Map response IDs to their admin reviews."""
        if not response_ids:
            return {}
        result = await self.session.execute(
            select(AdminResponseModel).where(AdminResponseModel.response_id.in_(response_ids))
        )
        return {admin.response_id: admin for admin in result.scalars().all()}

    async def save_admin_response(self, admin_response: AdminResponseModel) -> AdminResponseModel:
        """Insert or flush an admin review."""
        self.session.add(admin_response)
        await self.session.flush()
        return admin_response
