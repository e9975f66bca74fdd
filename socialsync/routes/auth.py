"""
Authentication routes for register, login, session and token management.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ..auth import (
    authenticate,
    create_tokens,
    get_current_user,
    get_password_hash,
    get_required_user,
    refresh_access_token,
)
from ..config import Settings
from ..deps import get_app_settings, get_storage
from ..logging_config import api_logger
from ..schemas import (
    LoginRequest,
    RefreshRequest,
    TokenResponse,
    User,
    UserInsert,
    UserProfile,
    validate_insert,
)
from ..storage import Storage
from ..responses import bad_request

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
def register(user_data: Dict[str, Any] = Body(...), storage: Storage = Depends(get_storage)):
    """Register a new user account."""
    data = validate_insert(UserInsert, user_data)
    data.password = get_password_hash(data.password)

    user = storage.create_user(data)
    api_logger.info("User registered", user_id=user.id)
    return UserProfile.from_user(user)


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    """Login with username/password and receive a token pair."""
    if not credentials.username or not credentials.password:
        bad_request("Username and password are required")

    user = authenticate(storage, credentials.username, credentials.password)
    if user is None:
        api_logger.warning("Failed login", username=credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    access_token, refresh_token = create_tokens(user.id, settings)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserProfile.from_user(user),
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh_tokens(
    refresh_request: RefreshRequest,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    """Get new access and refresh tokens using a valid refresh token."""
    tokens = refresh_access_token(refresh_request.refresh_token, storage, settings)
    if not tokens:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    access_token, refresh_token = tokens
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.get("/session")
def get_session(current_user: Optional[User] = Depends(get_current_user)):
    """Report whether the caller holds a valid identity."""
    if current_user:
        return {
            "isAuthenticated": True,
            "userId": current_user.id,
            "username": current_user.username,
        }
    return {"isAuthenticated": False}


@router.post("/logout")
def logout(current_user: User = Depends(get_required_user)):
    """
    Logout the current user.

    Tokens are stateless, so the client discards them.
    """
    return {"message": "Logged out successfully"}
