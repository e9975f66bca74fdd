from pydantic import BaseModel, Field
from typing import Optional


class UserInsert(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    display_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    instagram_auth_token: Optional[str] = None
    youtube_auth_token: Optional[str] = None


class User(UserInsert):
    id: int

    class Config:
        from_attributes = True


class UserProfile(BaseModel):
    """Public view of a user; never exposes the credential or raw tokens."""
    id: int
    username: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    has_instagram: bool = False
    has_youtube: bool = False

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            email=user.email,
            avatar_url=user.avatar_url,
            has_instagram=bool(user.instagram_auth_token),
            has_youtube=bool(user.youtube_auth_token),
        )


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    """Response with both access and refresh tokens."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: Optional[UserProfile] = None


class RefreshRequest(BaseModel):
    refresh_token: str
