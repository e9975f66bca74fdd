"""
User profile and platform connection routes.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends

from ..auth import get_required_user
from ..deps import get_storage
from ..logging_config import api_logger
from ..schemas import User, UserProfile
from ..storage import Storage
from ..responses import bad_request, not_found

router = APIRouter(prefix="/api", tags=["user"])

PLATFORM_TOKEN_ARGS = {
    "instagram": "instagram_token",
    "youtube": "youtube_token",
}


def _token_arg(platform: str) -> str:
    if platform not in PLATFORM_TOKEN_ARGS:
        not_found("Platform", platform)
    return PLATFORM_TOKEN_ARGS[platform]


@router.get("/user", response_model=UserProfile)
def get_user(current_user: User = Depends(get_required_user)):
    """Get the authenticated user's profile."""
    return UserProfile.from_user(current_user)


@router.post("/connect/{platform}")
def connect_platform(
    platform: str,
    token: Optional[str] = Body(None, embed=True),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_required_user),
):
    """Store an opaque auth token for a platform."""
    arg = _token_arg(platform)
    if not token:
        bad_request("Token is required")

    user = storage.update_user_tokens(current_user.id, **{arg: token})
    if user is None:
        not_found("User")

    api_logger.info("Platform connected", user_id=current_user.id, platform=platform)
    return {"success": True}


@router.delete("/connect/{platform}")
def disconnect_platform(
    platform: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_required_user),
):
    """Clear the stored token for a platform."""
    arg = _token_arg(platform)

    user = storage.update_user_tokens(current_user.id, **{arg: None})
    if user is None:
        not_found("User")

    api_logger.info("Platform disconnected", user_id=current_user.id, platform=platform)
    return {"success": True}
