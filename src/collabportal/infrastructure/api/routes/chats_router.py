"""Chat API routes. Messages are read by polling."""

from fastapi import APIRouter, status

from collabportal.infrastructure.api.dependencies import AuthenticatedUser, ChatServiceDep
from collabportal.infrastructure.api.schemas import (
    ChatMessageResponse,
    ChatResponse,
    PostMessageRequest,
)

router = APIRouter()


@router.get("", response_model=list[ChatResponse])
async def list_chats(current_user: AuthenticatedUser, service: ChatServiceDep) -> list[ChatResponse]:
    """List the caller's chats, or every chat for admins."""
    chats = await service.list_chats(current_user.user_id, is_admin=current_user.is_admin)
    return [ChatResponse.model_validate(c) for c in chats]


@router.get("/{chat_id}/messages", response_model=list[ChatMessageResponse])
async def list_messages(
    chat_id: str, current_user: AuthenticatedUser, service: ChatServiceDep
) -> list[ChatMessageResponse]:
    """List a chat's messages, oldest first."""
    messages = await service.list_messages(chat_id, current_user.user_id, is_admin=current_user.is_admin)
    return [ChatMessageResponse.model_validate(m) for m in messages]


@router.post(
    "/{chat_id}/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_message(
    chat_id: str,
    body: PostMessageRequest,
    current_user: AuthenticatedUser,
    service: ChatServiceDep,
) -> ChatMessageResponse:
    """Post a message to a chat."""
    message = await service.post_message(
        chat_id, current_user.user_id, body.message, is_admin=current_user.is_admin
    )
    return ChatMessageResponse.model_validate(message)
