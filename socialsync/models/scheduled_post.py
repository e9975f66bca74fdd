"""
ScheduledPost model for posts queued for future publication.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base


class ScheduledPost(Base):
    __tablename__ = "scheduled_posts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    platform = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    media_url = Column(Text, nullable=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, posted, failed

    # Relationships
    user = relationship("User", back_populates="scheduled_posts")
