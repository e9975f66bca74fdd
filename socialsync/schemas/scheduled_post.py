from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Literal, Optional

from .base import Platform, ensure_utc

ScheduledStatus = Literal["pending", "posted", "failed"]
SCHEDULED_STATUSES = ("pending", "posted", "failed")


class ScheduledPostInsert(BaseModel):
    user_id: int
    platform: Platform
    content: str = Field(min_length=1)
    media_url: Optional[str] = None
    scheduled_for: datetime
    status: ScheduledStatus = "pending"

    @field_validator("scheduled_for")
    @classmethod
    def _scheduled_for_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ScheduledPost(ScheduledPostInsert):
    id: int

    class Config:
        from_attributes = True


class ScheduledPostStatusUpdate(BaseModel):
    status: ScheduledStatus
