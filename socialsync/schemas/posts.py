from pydantic import BaseModel, Field, StrictBool, StrictInt, field_validator
from typing import Any, Optional
from datetime import datetime

from .base import Platform, ensure_utc, utc_now


class PostInsert(BaseModel):
    """A post as yielded by an ingestion source, before storage assigns an id."""
    platform: Platform
    content_id: str = Field(min_length=1)
    title: Optional[str] = None
    caption: Optional[str] = None
    thumbnail_url: Optional[str] = None
    original_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    likes_count: Optional[int] = 0
    views_count: Optional[int] = 0
    type: str = Field(min_length=1)  # post, story, video, photo, image, ...
    metadata: Optional[Any] = None
    is_cached: bool = False

    @field_validator("created_at", mode="before")
    @classmethod
    def _default_created_at(cls, value):
        return utc_now() if value is None else value

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class Post(PostInsert):
    id: int

    class Config:
        from_attributes = True


class PostUpdate(BaseModel):
    """Partial post update; only fields explicitly sent are applied."""
    platform: Optional[Platform] = None
    content_id: Optional[str] = None
    title: Optional[str] = None
    caption: Optional[str] = None
    thumbnail_url: Optional[str] = None
    original_url: Optional[str] = None
    created_at: Optional[datetime] = None
    likes_count: Optional[int] = None
    views_count: Optional[int] = None
    type: Optional[str] = None
    metadata: Optional[Any] = None
    is_cached: Optional[bool] = None

    @field_validator("platform", "content_id", "created_at", "type", "is_cached")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CacheToggleRequest(BaseModel):
    postId: StrictInt
    isCached: StrictBool
