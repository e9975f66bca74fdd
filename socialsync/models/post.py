"""
Post model for aggregated platform content.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Boolean, UniqueConstraint
from datetime import datetime, timezone
from ..database import Base


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (UniqueConstraint("platform", "content_id", name="uq_posts_platform_content"),)

    id = Column(Integer, primary_key=True, index=True)
    platform = Column(String(20), nullable=False, index=True)  # instagram, youtube
    content_id = Column(String(255), nullable=False)  # platform-native id
    title = Column(Text, nullable=True)
    caption = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    original_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    likes_count = Column(Integer, default=0)
    views_count = Column(Integer, default=0)
    type = Column(String(50), nullable=False)  # post, story, video, ...
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)
    is_cached = Column(Boolean, default=False, nullable=False)
