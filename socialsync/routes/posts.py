"""
Posts routes: browsing aggregated content, ingestion and cache flags.
"""
from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict, List, Optional

from ..auth import get_required_user
from ..deps import get_storage
from ..logging_config import api_logger
from ..schemas import PLATFORMS, CacheToggleRequest, Post, User
from ..storage import Storage
from ..responses import not_found

router = APIRouter(prefix="/api/posts", tags=["posts"])


def parse_platform_filter(raw: Optional[str]) -> Optional[List[str]]:
    """Turn ``instagram,youtube`` into a platform list.

    Absent or blank means no filter. Unknown names are dropped, so a value
    naming only unknown platforms yields an empty list (and no posts).
    """
    if raw is None or not raw.strip():
        return None
    names = [name.strip().lower() for name in raw.split(",")]
    return [name for name in PLATFORMS if name in names]


@router.get("", response_model=List[Post])
def get_posts(
    platform: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    """Get all posts, newest first, optionally restricted to some platforms."""
    return storage.get_posts(parse_platform_filter(platform))


@router.post("/cache")
def set_cache_status(
    request: CacheToggleRequest,
    storage: Storage = Depends(get_storage),
):
    """Mark a post as cached (or not) for offline viewing."""
    if not storage.set_cached_status(request.postId, request.isCached):
        not_found("Post")

    api_logger.info("Cache status updated", post_id=request.postId, is_cached=request.isCached)
    return {"success": True}


@router.get("/{post_id}", response_model=Post)
def get_post(post_id: int, storage: Storage = Depends(get_storage)):
    """Get a single post by ID."""
    post = storage.get_post_by_id(post_id)
    if not post:
        not_found("Post")
    return post


@router.post("", response_model=Post, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: Dict[str, Any] = Body(...),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_required_user),
):
    """Ingest a post produced by a platform integration."""
    post = storage.create_post(post_data)
    api_logger.info("Post ingested", post_id=post.id, platform=post.platform)
    return post


@router.patch("/{post_id}", response_model=Post)
def update_post(
    post_id: int,
    post_update: Dict[str, Any] = Body(...),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_required_user),
):
    """Apply a partial update to a post."""
    post = storage.update_post(post_id, post_update)
    if not post:
        not_found("Post")
    return post


@router.delete("/{post_id}")
def delete_post(
    post_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_required_user),
):
    """Delete a post."""
    if not storage.delete_post(post_id):
        not_found("Post")
    return {"message": "Post deleted"}
