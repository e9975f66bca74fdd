"""
The storage contract shared by every backend.

Backends satisfy :class:`Storage` structurally; callers receive an instance
built at startup and never inspect which implementation they hold.
"""
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Union

from ..schemas import (
    Post,
    PostInsert,
    PostUpdate,
    ScheduledPost,
    ScheduledPostInsert,
    User,
    UserInsert,
)


class _Unset:
    """Marker for an argument that was not supplied at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

TokenArg = Union[str, None, _Unset]
Payload = Union[Mapping[str, Any], Any]


class Storage(Protocol):
    """Persistence operations for users, posts and scheduled posts."""

    # Users
    def get_user(self, user_id: int) -> Optional[User]: ...

    def get_user_by_username(self, username: str) -> Optional[User]: ...

    def create_user(self, insert: Union[UserInsert, Payload]) -> User: ...

    def update_user_tokens(
        self,
        user_id: int,
        instagram_token: TokenArg = UNSET,
        youtube_token: TokenArg = UNSET,
    ) -> Optional[User]: ...

    # Posts
    def get_posts(self, platforms: Optional[Iterable[str]] = None) -> List[Post]: ...

    def get_post_by_id(self, post_id: int) -> Optional[Post]: ...

    def create_post(self, insert: Union[PostInsert, Payload]) -> Post: ...

    def update_post(self, post_id: int, partial: Union[PostUpdate, Payload]) -> Optional[Post]: ...

    def delete_post(self, post_id: int) -> bool: ...

    def set_cached_status(self, post_id: int, is_cached: bool) -> bool: ...

    # Scheduled posts
    def get_scheduled_posts(self, user_id: int) -> List[ScheduledPost]: ...

    def create_scheduled_post(self, insert: Union[ScheduledPostInsert, Payload]) -> ScheduledPost: ...

    def update_scheduled_post_status(self, scheduled_post_id: int, status: str) -> Optional[ScheduledPost]: ...


def token_changes(instagram_token: TokenArg, youtube_token: TokenArg) -> dict:
    """Map tri-state token arguments to the column updates they imply."""
    changes = {}
    if instagram_token is not UNSET:
        changes["instagram_auth_token"] = instagram_token
    if youtube_token is not UNSET:
        changes["youtube_auth_token"] = youtube_token
    return changes
