"""
Ephemeral in-process storage backend.

Not safe for concurrent mutation from several threads; deployments that
serve real traffic use :class:`~socialsync.storage.sql.DatabaseStorage`.
"""
from typing import Dict, Iterable, List, Optional

from ..errors import ConflictError, ValidationError
from ..logging_config import storage_logger
from ..schemas import (
    Post,
    PostInsert,
    PostUpdate,
    ScheduledPost,
    ScheduledPostInsert,
    ScheduledPostStatusUpdate,
    User,
    UserInsert,
    validate_insert,
)
from .base import UNSET, TokenArg, token_changes


class MemStorage:
    """Dict-backed storage with per-entity id counters starting at 1."""

    backend_name = "memory"

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._posts: Dict[int, Post] = {}
        self._scheduled_posts: Dict[int, ScheduledPost] = {}
        self._next_user_id = 1
        self._next_post_id = 1
        self._next_scheduled_post_id = 1
        self._log = storage_logger.bind(backend=self.backend_name)

    # ---------------------------------------------------------------- users

    def get_user(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user.model_copy(deep=True)
        return None

    def create_user(self, insert) -> User:
        data = validate_insert(UserInsert, insert)
        if self.get_user_by_username(data.username) is not None:
            raise ConflictError(f"Username '{data.username}' already exists")

        user = User(id=self._next_user_id, **data.model_dump())
        self._next_user_id += 1
        self._users[user.id] = user
        self._log.info("User created", user_id=user.id)
        return user.model_copy(deep=True)

    def update_user_tokens(
        self,
        user_id: int,
        instagram_token: TokenArg = UNSET,
        youtube_token: TokenArg = UNSET,
    ) -> Optional[User]:
        user = self._users.get(user_id)
        if user is None:
            return None

        updated = user.model_copy(update=token_changes(instagram_token, youtube_token))
        self._users[user_id] = updated
        return updated.model_copy(deep=True)

    # ---------------------------------------------------------------- posts

    def get_posts(self, platforms: Optional[Iterable[str]] = None) -> List[Post]:
        posts = list(self._posts.values())
        if platforms is not None:
            wanted = set(platforms)
            posts = [p for p in posts if p.platform in wanted]

        # Stable sort keeps ascending id among equal timestamps
        posts = sorted(posts, key=lambda p: p.created_at, reverse=True)
        return [p.model_copy(deep=True) for p in posts]

    def get_post_by_id(self, post_id: int) -> Optional[Post]:
        post = self._posts.get(post_id)
        return post.model_copy(deep=True) if post else None

    def create_post(self, insert) -> Post:
        data = validate_insert(PostInsert, insert)
        self._check_post_identity(data.platform, data.content_id)

        post = Post(id=self._next_post_id, **data.model_dump())
        self._next_post_id += 1
        self._posts[post.id] = post
        return post.model_copy(deep=True)

    def update_post(self, post_id: int, partial) -> Optional[Post]:
        changes = validate_insert(PostUpdate, partial).changes()
        post = self._posts.get(post_id)
        if post is None:
            return None

        platform = changes.get("platform", post.platform)
        content_id = changes.get("content_id", post.content_id)
        if (platform, content_id) != (post.platform, post.content_id):
            self._check_post_identity(platform, content_id)

        updated = post.model_copy(update=changes)
        self._posts[post_id] = updated
        return updated.model_copy(deep=True)

    def delete_post(self, post_id: int) -> bool:
        return self._posts.pop(post_id, None) is not None

    def set_cached_status(self, post_id: int, is_cached: bool) -> bool:
        post = self._posts.get(post_id)
        if post is None:
            return False

        self._posts[post_id] = post.model_copy(update={"is_cached": bool(is_cached)})
        return True

    def _check_post_identity(self, platform: str, content_id: str) -> None:
        for existing in self._posts.values():
            if existing.platform == platform and existing.content_id == content_id:
                raise ConflictError(f"Post {platform}:{content_id} already exists")

    # ------------------------------------------------------ scheduled posts

    def get_scheduled_posts(self, user_id: int) -> List[ScheduledPost]:
        posts = [p for p in self._scheduled_posts.values() if p.user_id == user_id]
        posts = sorted(posts, key=lambda p: p.scheduled_for)
        return [p.model_copy(deep=True) for p in posts]

    def create_scheduled_post(self, insert) -> ScheduledPost:
        data = validate_insert(ScheduledPostInsert, insert)
        if data.user_id not in self._users:
            raise ValidationError([{"field": "user_id", "message": f"User {data.user_id} does not exist"}])

        post = ScheduledPost(id=self._next_scheduled_post_id, **data.model_dump())
        self._next_scheduled_post_id += 1
        self._scheduled_posts[post.id] = post
        return post.model_copy(deep=True)

    def update_scheduled_post_status(self, scheduled_post_id: int, status: str) -> Optional[ScheduledPost]:
        status = validate_insert(ScheduledPostStatusUpdate, {"status": status}).status
        post = self._scheduled_posts.get(scheduled_post_id)
        if post is None:
            return None

        updated = post.model_copy(update={"status": status})
        self._scheduled_posts[scheduled_post_id] = updated
        return updated.model_copy(deep=True)
