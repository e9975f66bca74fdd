"""
Scheduled posts routes for queuing content for future publication.
"""
from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict, List

from ..auth import get_required_user
from ..config import Settings
from ..deps import get_app_settings, get_storage
from ..errors import ValidationError
from ..logging_config import api_logger
from ..schemas import (
    ScheduledPost,
    ScheduledPostInsert,
    ScheduledPostStatusUpdate,
    User,
    utc_now,
    validate_insert,
)
from ..storage import Storage
from ..responses import not_found

router = APIRouter(prefix="/api/scheduled-posts", tags=["scheduled-posts"])


@router.get("", response_model=List[ScheduledPost])
def get_scheduled_posts(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_required_user),
):
    """Get the current user's scheduled posts, soonest first."""
    return storage.get_scheduled_posts(current_user.id)


@router.post("", response_model=ScheduledPost, status_code=status.HTTP_201_CREATED)
def create_scheduled_post(
    post_data: Dict[str, Any] = Body(...),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(get_required_user),
):
    """Queue a post for the current user. New entries always start as pending."""
    payload = {k: v for k, v in post_data.items() if k not in ("user_id", "status")}
    payload["user_id"] = current_user.id
    data = validate_insert(ScheduledPostInsert, payload)

    if settings.enforce_future_schedule and data.scheduled_for <= utc_now():
        raise ValidationError([
            {"field": "scheduled_for", "message": "Scheduled time must be in the future"},
        ])

    post = storage.create_scheduled_post(data)
    api_logger.info(
        "Scheduled post created",
        user_id=current_user.id,
        scheduled_post_id=post.id,
        platform=post.platform,
    )
    return post


@router.patch("/{scheduled_post_id}/status", response_model=ScheduledPost)
def update_scheduled_post_status(
    scheduled_post_id: int,
    update: ScheduledPostStatusUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_required_user),
):
    """Record the outcome of publishing a scheduled post (must belong to current user)."""
    owned = {p.id for p in storage.get_scheduled_posts(current_user.id)}
    if scheduled_post_id not in owned:
        not_found("Scheduled post")

    return storage.update_scheduled_post_status(scheduled_post_id, update.status)
