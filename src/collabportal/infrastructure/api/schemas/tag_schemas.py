"""Pydantic schemas for tag endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TagCreateRequest(BaseModel):
    """Request body for creating a tag."""

    name: str = Field("", description="Tag name")
    color: str | None = Field(None, max_length=20, description="Display color")


class TagUpdateRequest(BaseModel):
    """Request body for renaming or recoloring a tag."""

    name: str | None = None
    color: str | None = Field(None, max_length=20)


class UserTagsRequest(BaseModel):
    """Request body replacing the tags a user carries."""

    model_config = ConfigDict(populate_by_name=True)

    tag_ids: list[str] = Field(default_factory=list, alias="tagIds")


class TagResponse(BaseModel):
    """Tag details."""

    id: str
    name: str
    color: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
