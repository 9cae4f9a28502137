"""User profile repository."""

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.domain.entities.clock import utcnow
from collabportal.domain.entities.user import UserRole
from collabportal.infrastructure.persistence.models import (
    AdminResponseModel,
    AuthAccountModel,
    ChatMessageModel,
    ChatModel,
    InvitationModel,
    NotificationModel,
    PasswordResetTokenModel,
    ProposalModel,
    ProposalVisibilityModel,
    ResponseModel,
    UserModel,
    UserTagModel,
)


class UserRepository:
    """Repository for user profile operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a profile by ID."""
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a profile by email, case-insensitively."""
        result = await self.session.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def list_by_role(self, role: UserRole) -> list[UserModel]:
        """List profiles with the given role."""
        result = await self.session.execute(
            select(UserModel).where(UserModel.role == role.value).order_by(UserModel.email)
        )
        return list(result.scalars().all())

    async def list_by_ids(self, user_ids: list[str]) -> list[UserModel]:
        """List profiles for the given IDs."""
        if not user_ids:
            return []
        result = await self.session.execute(select(UserModel).where(UserModel.id.in_(user_ids)))
        return list(result.scalars().all())

    async def existing_ids(self, user_ids: list[str]) -> set[str]:
        """Return the subset of IDs that have a profile."""
        if not user_ids:
            return set()
        result = await self.session.execute(select(UserModel.id).where(UserModel.id.in_(user_ids)))
        return set(result.scalars().all())

    async def upsert_profile(
        self,
        user_id: str,
        email: str,
        full_name: str | None = None,
        phone_number: str | None = None,
        role: UserRole = UserRole.USER,
    ) -> UserModel:
        """Create a profile, or update name and phone on an existing one.

        The role of an existing profile is never changed here.

        Args:
            user_id: Profile ID (same as the auth account ID).
            email: Email address.
            full_name: Display name.
            phone_number: Optional contact number.
            role: Role for a newly created profile.

        Returns:
            The created or updated profile.
        """
        user = await self.get_by_id(user_id)
        if user is None:
            user = UserModel(
                id=user_id,
                email=email,
                full_name=full_name,
                phone_number=phone_number,
                role=role.value,
            )
            self.session.add(user)
        else:
            user.email = email
            if full_name is not None:
                user.full_name = full_name
            if phone_number is not None:
                user.phone_number = phone_number
            user.updated_at = utcnow()
        await self.session.flush()
        return user

    async def delete_cascade(self, user: UserModel) -> None:
        """Delete a user together with everything that belongs to them.

        Children go first: tag assignments, notifications, chat messages,
        chats, visibility rows, admin responses, responses, invitations and
        reset tokens for the email. Proposals the user authored are kept with
        ``created_by`` cleared. The profile and the auth account go last.
        """
        response_ids = select(ResponseModel.id).where(ResponseModel.user_id == user.id)
        chat_ids = select(ChatModel.id).where(ChatModel.user_id == user.id)

        await self.session.execute(delete(UserTagModel).where(UserTagModel.user_id == user.id))
        await self.session.execute(
            delete(NotificationModel).where(
                or_(
                    NotificationModel.recipient_id == user.id,
                    NotificationModel.related_response_id.in_(response_ids),
                )
            )
        )
        await self.session.execute(
            delete(ChatMessageModel).where(
                or_(ChatMessageModel.chat_id.in_(chat_ids), ChatMessageModel.user_id == user.id)
            )
        )
        await self.session.execute(delete(ChatModel).where(ChatModel.user_id == user.id))
        await self.session.execute(
            delete(ProposalVisibilityModel).where(ProposalVisibilityModel.user_id == user.id)
        )
        await self.session.execute(
            delete(AdminResponseModel).where(AdminResponseModel.response_id.in_(response_ids))
        )
        await self.session.execute(delete(ResponseModel).where(ResponseModel.user_id == user.id))
        await self.session.execute(
            delete(InvitationModel).where(func.lower(InvitationModel.email) == user.email.lower())
        )
        await self.session.execute(
            delete(PasswordResetTokenModel).where(
                func.lower(PasswordResetTokenModel.email) == user.email.lower()
            )
        )
        await self.session.execute(
            update(ProposalModel).where(ProposalModel.created_by == user.id).values(created_by=None)
        )
        await self.session.execute(delete(UserModel).where(UserModel.id == user.id))
        await self.session.execute(delete(AuthAccountModel).where(AuthAccountModel.id == user.id))
        await self.session.flush()
