"""
Durable relational storage backend built on SQLAlchemy.

Every operation runs in its own session and commits before returning;
isolation between concurrent callers is left to the database engine.
"""
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from .. import models
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


def _to_post(row: models.Post) -> Post:
    return Post(
        id=row.id,
        platform=row.platform,
        content_id=row.content_id,
        title=row.title,
        caption=row.caption,
        thumbnail_url=row.thumbnail_url,
        original_url=row.original_url,
        created_at=row.created_at,
        likes_count=row.likes_count,
        views_count=row.views_count,
        type=row.type,
        metadata=row.meta,
        is_cached=bool(row.is_cached),
    )


def _post_columns(values: dict) -> dict:
    values = dict(values)
    if "metadata" in values:
        values["meta"] = values.pop("metadata")
    return values


class DatabaseStorage:
    """Storage backed by any SQLAlchemy-supported database."""

    backend_name = "database"

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._log = storage_logger.bind(backend=self.backend_name)

    def _session(self) -> Session:
        return self._session_factory()

    def _commit(self, db: Session, message: str) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            self._log.warning("Integrity violation", error_message=str(e.orig))
            raise ConflictError(message) from e

    # ---------------------------------------------------------------- users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._session() as db:
            row = db.get(models.User, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as db:
            row = db.query(models.User).filter(models.User.username == username).first()
            return User.model_validate(row) if row else None

    def create_user(self, insert) -> User:
        data = validate_insert(UserInsert, insert)
        message = f"Username '{data.username}' already exists"

        with self._session() as db:
            if db.query(models.User.id).filter(models.User.username == data.username).first():
                raise ConflictError(message)

            row = models.User(**data.model_dump())
            db.add(row)
            self._commit(db, message)
            db.refresh(row)
            self._log.info("User created", user_id=row.id)
            return User.model_validate(row)

    def update_user_tokens(
        self,
        user_id: int,
        instagram_token: TokenArg = UNSET,
        youtube_token: TokenArg = UNSET,
    ) -> Optional[User]:
        with self._session() as db:
            row = db.get(models.User, user_id)
            if row is None:
                return None

            for field, value in token_changes(instagram_token, youtube_token).items():
                setattr(row, field, value)
            db.commit()
            db.refresh(row)
            return User.model_validate(row)

    # ---------------------------------------------------------------- posts

    def get_posts(self, platforms: Optional[Iterable[str]] = None) -> List[Post]:
        with self._session() as db:
            query = db.query(models.Post)
            if platforms is not None:
                wanted = list(set(platforms))
                if not wanted:
                    return []
                query = query.filter(models.Post.platform.in_(wanted))

            rows = query.order_by(models.Post.created_at.desc(), models.Post.id.asc()).all()
            return [_to_post(r) for r in rows]

    def get_post_by_id(self, post_id: int) -> Optional[Post]:
        with self._session() as db:
            row = db.get(models.Post, post_id)
            return _to_post(row) if row else None

    def create_post(self, insert) -> Post:
        data = validate_insert(PostInsert, insert)
        message = f"Post {data.platform}:{data.content_id} already exists"

        with self._session() as db:
            self._check_post_identity(db, data.platform, data.content_id, message)
            row = models.Post(**_post_columns(data.model_dump()))
            db.add(row)
            self._commit(db, message)
            db.refresh(row)
            return _to_post(row)

    def update_post(self, post_id: int, partial) -> Optional[Post]:
        changes = validate_insert(PostUpdate, partial).changes()

        with self._session() as db:
            row = db.get(models.Post, post_id)
            if row is None:
                return None

            platform = changes.get("platform", row.platform)
            content_id = changes.get("content_id", row.content_id)
            message = f"Post {platform}:{content_id} already exists"
            if (platform, content_id) != (row.platform, row.content_id):
                self._check_post_identity(db, platform, content_id, message)

            for field, value in _post_columns(changes).items():
                setattr(row, field, value)
            self._commit(db, message)
            db.refresh(row)
            return _to_post(row)

    def delete_post(self, post_id: int) -> bool:
        with self._session() as db:
            row = db.get(models.Post, post_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def set_cached_status(self, post_id: int, is_cached: bool) -> bool:
        with self._session() as db:
            row = db.get(models.Post, post_id)
            if row is None:
                return False
            row.is_cached = bool(is_cached)
            db.commit()
            return True

    @staticmethod
    def _check_post_identity(db: Session, platform: str, content_id: str, message: str) -> None:
        exists = db.query(models.Post.id).filter(
            models.Post.platform == platform,
            models.Post.content_id == content_id,
        ).first()
        if exists:
            raise ConflictError(message)

    # ------------------------------------------------------ scheduled posts

    def get_scheduled_posts(self, user_id: int) -> List[ScheduledPost]:
        with self._session() as db:
            rows = (
                db.query(models.ScheduledPost)
                .filter(models.ScheduledPost.user_id == user_id)
                .order_by(models.ScheduledPost.scheduled_for.asc(), models.ScheduledPost.id.asc())
                .all()
            )
            return [ScheduledPost.model_validate(r) for r in rows]

    def create_scheduled_post(self, insert) -> ScheduledPost:
        data = validate_insert(ScheduledPostInsert, insert)

        with self._session() as db:
            if db.get(models.User, data.user_id) is None:
                raise ValidationError([{"field": "user_id", "message": f"User {data.user_id} does not exist"}])

            row = models.ScheduledPost(**data.model_dump())
            db.add(row)
            self._commit(db, f"Scheduled post for user {data.user_id} could not be stored")
            db.refresh(row)
            return ScheduledPost.model_validate(row)

    def update_scheduled_post_status(self, scheduled_post_id: int, status: str) -> Optional[ScheduledPost]:
        status = validate_insert(ScheduledPostStatusUpdate, {"status": status}).status

        with self._session() as db:
            row = db.get(models.ScheduledPost, scheduled_post_id)
            if row is None:
                return None
            row.status = status
            db.commit()
            db.refresh(row)
            return ScheduledPost.model_validate(row)
