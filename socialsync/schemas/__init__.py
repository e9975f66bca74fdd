from .base import PLATFORMS, Platform, ensure_utc, utc_now, validate_insert
from .user import UserInsert, User, UserProfile, LoginRequest, TokenResponse, RefreshRequest
from .posts import PostInsert, Post, PostUpdate, CacheToggleRequest
from .scheduled_post import (
    SCHEDULED_STATUSES,
    ScheduledStatus,
    ScheduledPostInsert,
    ScheduledPost,
    ScheduledPostStatusUpdate,
)

__all__ = [
    "PLATFORMS", "Platform", "ensure_utc", "utc_now", "validate_insert",
    "UserInsert", "User", "UserProfile", "LoginRequest", "TokenResponse", "RefreshRequest",
    "PostInsert", "Post", "PostUpdate", "CacheToggleRequest",
    "SCHEDULED_STATUSES", "ScheduledStatus", "ScheduledPostInsert", "ScheduledPost",
    "ScheduledPostStatusUpdate",
]
