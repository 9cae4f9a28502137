"""Admin user management routes."""

from fastapi import APIRouter

from collabportal.core.logging import get_logger
from collabportal.domain.entities import UserRole
from collabportal.infrastructure.api.dependencies import AdminUser, Session, UserServiceDep
from collabportal.infrastructure.api.schemas import DeleteUserRequest, UserResponse
from collabportal.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
async def list_users(current_user: AdminUser, session: Session) -> list[UserResponse]:
    """List non-admin users, the pool a proposal audience is picked from."""
    users = await UserRepository(session).list_by_role(UserRole.USER)
    return [UserResponse.model_validate(u) for u in users]


@router.delete("/delete-user")
async def delete_user(
    body: DeleteUserRequest,
    current_user: AdminUser,
    service: UserServiceDep,
) -> dict:
    """Delete a user together with their responses, chats, tags and notifications."""
    await service.delete_user(body.user_id or "", current_user.user_id)
    return {
        "success": True,
        "message": "User and all related data deleted successfully",
    }
