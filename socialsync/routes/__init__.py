from .auth import router as auth_router
from .user import router as user_router
from .posts import router as posts_router
from .scheduled_posts import router as scheduled_posts_router

__all__ = [
    "auth_router",
    "user_router",
    "posts_router",
    "scheduled_posts_router",
]
