"""
Identity resolution: password hashing, JWT bearer tokens and the FastAPI
dependencies that turn a request into a ``User``.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from .config import Settings, get_settings
from .deps import get_app_settings, get_storage
from .schemas import User
from .storage import Storage

# pbkdf2 keeps passlib independent of the bcrypt C extension
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

ACCESS = "access"
REFRESH = "refresh"


# ============================================================
# PASSWORDS
# ============================================================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognised hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    return pwd_context.hash(password)


def authenticate(storage: Storage, username: str, password: str) -> Optional[User]:
    """The user owning these credentials, or None."""
    user = storage.get_user_by_username(username)
    if user is None or not verify_password(password, user.password):
        return None
    return user


# ============================================================
# TOKENS
# ============================================================

def _encode(claims: dict, token_type: str, lifetime: timedelta, settings: Settings) -> str:
    payload = {**claims, "exp": datetime.now(timezone.utc) + lifetime, "type": token_type}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(
    data: dict, expires_delta: Optional[timedelta] = None, settings: Optional[Settings] = None
) -> str:
    """Create a JWT access token."""
    settings = settings or get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(data, ACCESS, lifetime, settings)


def create_refresh_token(data: dict, settings: Optional[Settings] = None) -> str:
    """Create a JWT refresh token with longer expiration."""
    settings = settings or get_settings()
    return _encode(data, REFRESH, timedelta(days=settings.refresh_token_expire_days), settings)


def create_tokens(user_id: int, settings: Optional[Settings] = None) -> Tuple[str, str]:
    """Access and refresh token pair for a user."""
    claims = {"sub": str(user_id)}  # JWT sub claim must be a string
    return create_access_token(claims, settings=settings), create_refresh_token(claims, settings)


def verify_token(token: str, expected_type: str = ACCESS, settings: Optional[Settings] = None) -> Optional[dict]:
    """Decoded payload of a valid, unexpired token of the given type."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("type", ACCESS) != expected_type:
        return None
    return payload


def user_id_from_token(
    token: str, expected_type: str = ACCESS, settings: Optional[Settings] = None
) -> Optional[int]:
    payload = verify_token(token, expected_type, settings)
    if not payload:
        return None
    try:
        return int(payload.get("sub"))
    except (ValueError, TypeError):
        return None


def refresh_access_token(
    refresh_token: str, storage: Storage, settings: Optional[Settings] = None
) -> Optional[Tuple[str, str]]:
    """Exchange a refresh token for a new pair while its user still exists."""
    user_id = user_id_from_token(refresh_token, REFRESH, settings)
    if user_id is None or storage.get_user(user_id) is None:
        return None
    return create_tokens(user_id, settings)


# ============================================================
# DEPENDENCIES
# ============================================================

def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> Optional[User]:
    """Resolve the caller's identity, or None for anonymous requests."""
    user_id = user_id_from_token(token, settings=settings) if token else None
    if user_id is None:
        return None
    return storage.get_user(user_id)


def get_required_user(
    current_user: Optional[User] = Depends(get_current_user)
) -> User:
    """Get the current user, raising 401 if not authenticated."""
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user
