"""Request/response bodies for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from class_likes.domain.value_objects.enums import LikeAction


class LikeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    class_id: str = Field(min_length=1, validation_alias="classId")
    action: LikeAction


class LikesOut(BaseModel):
    likes: dict[str, int]


class MutationOut(BaseModel):
    success: bool
    count: int
    error: str | None = None
