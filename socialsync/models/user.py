"""
User model for authentication and platform connections.
"""
from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    instagram_auth_token = Column(Text, nullable=True)
    youtube_auth_token = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)
    display_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)

    # Relationships
    scheduled_posts = relationship("ScheduledPost", back_populates="user")
