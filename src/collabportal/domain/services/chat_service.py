"""Proposal chats.

Each (proposal, user) pair has at most one chat, created the first time a
message is posted. Messages are append-only and read by polling.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.logging import get_logger
from collabportal.domain.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from collabportal.infrastructure.persistence.models import ChatMessageModel, ChatModel
from collabportal.infrastructure.persistence.repositories import ChatRepository

logger = get_logger(__name__)


class ChatService:
    """Reads and appends chat messages."""

    def __init__(self, session: AsyncSession, chat_repo: ChatRepository) -> None:
        self.session = session
        self.chat_repo = chat_repo

    async def get_or_create(self, proposal_id: str, user_id: str) -> ChatModel:
        """Return the chat for a (proposal, user) pair, creating it if needed.

        Flushes only; the caller owns the transaction.
        """
        chat = await self.chat_repo.get_for(proposal_id, user_id)
        if chat is None:
            chat = await self.chat_repo.create(proposal_id, user_id)
            logger.debug("Chat created", chat_id=chat.id, proposal_id=proposal_id, user_id=user_id)
        return chat

    async def append(
        self, proposal_id: str, user_id: str, sender_id: str, message: str
    ) -> ChatMessageModel:
        """Append a message to the pair's chat inside the caller's transaction.

        Args:
            proposal_id: Proposal the chat is about.
            user_id: User the chat belongs to.
            sender_id: Author of the message (the user or an admin).
            message: Message text.

        Returns:
            The stored message.
        """
        chat = await self.get_or_create(proposal_id, user_id)
        return await self.chat_repo.add_message(chat.id, sender_id, message)

    async def _get_accessible(self, chat_id: str, user_id: str, is_admin: bool) -> ChatModel:
        chat = await self.chat_repo.get_by_id(chat_id)
        if chat is None:
            raise NotFoundError("Chat not found")
        if not is_admin and chat.user_id != user_id:
            raise PermissionDeniedError("You do not have access to this chat")
        return chat

    async def post_message(
        self, chat_id: str, sender_id: str, message: str, is_admin: bool = False
    ) -> ChatMessageModel:
        """Post a message to an existing chat and commit.

        Raises:
            ValidationError: If the message is empty.
            NotFoundError: If the chat does not exist.
            PermissionDeniedError: If a non-admin posts to someone else's chat.
        """
        message = (message or "").strip()
        if not message:
            raise ValidationError("Message is required")
        chat = await self._get_accessible(chat_id, sender_id, is_admin)
        chat_message = await self.chat_repo.add_message(chat.id, sender_id, message)
        await self.session.commit()
        return chat_message

    async def list_messages(
        self, chat_id: str, user_id: str, is_admin: bool = False
    ) -> list[ChatMessageModel]:
        """List a chat's messages, oldest first."""
        chat = await self._get_accessible(chat_id, user_id, is_admin)
        return await self.chat_repo.list_messages(chat.id)

    async def list_chats(self, user_id: str, is_admin: bool = False) -> list[ChatModel]:
        """List chats: all of them for admins, the user's own otherwise."""
        return await self.chat_repo.list_for_user(None if is_admin else user_id)
