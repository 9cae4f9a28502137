"""Chat and chat message repository."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.infrastructure.persistence.models import ChatMessageModel, ChatModel


class ChatRepository:
    """Repository for chats and their messages."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, chat_id: str) -> ChatModel | None:
        """Get a chat by ID."""
        result = await self.session.execute(select(ChatModel).where(ChatModel.id == chat_id))
        return result.scalar_one_or_none()

    async def get_for(self, proposal_id: str, user_id: str) -> ChatModel | None:
        """Get the chat for a (proposal, user) pair."""
        result = await self.session.execute(
            select(ChatModel).where(
                ChatModel.proposal_id == proposal_id,
                ChatModel.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, proposal_id: str, user_id: str) -> ChatModel:
        """Create the chat for a (proposal, user) pair."""
        chat = ChatModel(id=str(uuid.uuid4()), proposal_id=proposal_id, user_id=user_id)
        self.session.add(chat)
        await self.session.flush()
        return chat

    async def list_for_user(self, user_id: str | None = None) -> list[ChatModel]:
        """List chats, optionally restricted to one user."""
        query = select(ChatModel)
        if user_id is not None:
            query = query.where(ChatModel.user_id == user_id)
        result = await self.session.execute(query.order_by(ChatModel.created_at.desc()))
        return list(result.scalars().all())

    async def add_message(self, chat_id: str, user_id: str, message: str) -> ChatMessageModel:
        """Append a message to a chat."""
        chat_message = ChatMessageModel(
            id=str(uuid.uuid4()),
            chat_id=chat_id,
            user_id=user_id,
            message=message,
        )
        self.session.add(chat_message)
        await self.session.flush()
        return chat_message

    async def list_messages(self, chat_id: str) -> list[ChatMessageModel]:
        """List a chat's messages in the order they were written."""
        result = await self.session.execute(
            select(ChatMessageModel)
            .where(ChatMessageModel.chat_id == chat_id)
            .order_by(ChatMessageModel.created_at)
        )
        return list(result.scalars().all())
