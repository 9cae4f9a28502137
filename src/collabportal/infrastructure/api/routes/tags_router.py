"""Tag API routes. Admin only."""

from fastapi import APIRouter, Query, status

from collabportal.infrastructure.api.dependencies import AdminUser, TagServiceDep
from collabportal.infrastructure.api.schemas import (
    TagCreateRequest,
    TagResponse,
    TagUpdateRequest,
    UserResponse,
    UserTagsRequest,
)

router = APIRouter()


@router.get("/tags", response_model=list[TagResponse])
async def list_tags(current_user: AdminUser, service: TagServiceDep) -> list[TagResponse]:
    """List all tags ordered by name."""
    return [TagResponse.model_validate(t) for t in await service.list_tags()]


@router.post("/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(body: TagCreateRequest, current_user: AdminUser, service: TagServiceDep) -> TagResponse:
    """Create a tag."""
    return TagResponse.model_validate(await service.create(body.name, body.color))


@router.get("/tags/users", response_model=list[UserResponse])
async def users_for_tags(
    current_user: AdminUser,
    service: TagServiceDep,
    tag_ids: str = Query("", description="Comma-separated tag IDs"),
) -> list[UserResponse]:
    """List users carrying any of the given tags."""
    ids = [t.strip() for t in tag_ids.split(",") if t.strip()]
    return [UserResponse.model_validate(u) for u in await service.users_for_tags(ids)]


@router.put("/tags/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: str, body: TagUpdateRequest, current_user: AdminUser, service: TagServiceDep
) -> TagResponse:
    """Rename or recolor a tag."""
    return TagResponse.model_validate(await service.update(tag_id, body.name, body.color))


@router.delete("/tags/{tag_id}")
async def delete_tag(tag_id: str, current_user: AdminUser, service: TagServiceDep) -> dict:
    """Delete a tag and remove it from every user."""
    await service.delete(tag_id)
    return {"success": True, "message": "Tag deleted successfully"}


@router.put("/users/{user_id}/tags", response_model=list[TagResponse])
async def set_user_tags(
    user_id: str, body: UserTagsRequest, current_user: AdminUser, service: TagServiceDep
) -> list[TagResponse]:
    """Replace the tags a user carries."""
    return [TagResponse.model_validate(t) for t in await service.set_user_tags(user_id, body.tag_ids)]
