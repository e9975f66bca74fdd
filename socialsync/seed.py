"""
Demo data: one user and a handful of posts from each platform.
"""
from datetime import datetime, timedelta, timezone

from .auth import get_password_hash
from .logging_config import get_logger
from .storage import Storage

logger = get_logger("seed")

DEMO_USER = {
    "username": "demo",
    "password": "password",
    "display_name": "John Doe",
    "email": "john@example.com",
    "avatar_url": "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=256&h=256&fit=facearea",
}


def demo_posts(now: datetime = None) -> list:
    now = now or datetime.now(timezone.utc)
    days = lambda n: now - timedelta(days=n)  # noqa: E731

    return [
        {
            "platform": "instagram",
            "content_id": "1234567890",
            "caption": "Had an amazing time at the beach today! The sunset was absolutely stunning. #beachday #sunset",
            "thumbnail_url": "https://images.unsplash.com/photo-1515886657613-9f3515b0c78f?w=800",
            "original_url": "https://instagram.com/p/1234567890",
            "created_at": days(2),
            "likes_count": 248,
            "type": "post",
            "is_cached": True,
        },
        {
            "platform": "instagram",
            "content_id": "2345678901",
            "caption": "Coffee and productivity go hand in hand. Starting the day right! #morningroutine",
            "thumbnail_url": "https://images.unsplash.com/photo-1544005313-94ddf0286df2?w=800",
            "original_url": "https://instagram.com/p/2345678901",
            "created_at": days(3),
            "likes_count": 189,
            "type": "story",
            "is_cached": True,
        },
        {
            "platform": "youtube",
            "content_id": "3456789012",
            "title": "How to Build Your First Web App | Complete Tutorial",
            "caption": "Learn everything you need to know about building a web application from scratch.",
            "thumbnail_url": "https://images.unsplash.com/photo-1492538368677-f6e0afe31dcc?w=800",
            "original_url": "https://youtube.com/watch?v=3456789012",
            "created_at": days(7),
            "views_count": 2300,
            "type": "video",
            "is_cached": True,
        },
        {
            "platform": "youtube",
            "content_id": "4567890123",
            "title": "10 VS Code Extensions Every Developer Should Use",
            "caption": "Boost your productivity with these essential VS Code extensions.",
            "thumbnail_url": "https://images.unsplash.com/photo-1498050108023-c5249f4df085?w=800",
            "original_url": "https://youtube.com/watch?v=4567890123",
            "created_at": days(14),
            "views_count": 4700,
            "type": "video",
            "is_cached": True,
        },
        {
            "platform": "instagram",
            "content_id": "5678901234",
            "caption": "My home office setup is finally complete! What do you think? #homeoffice",
            "thumbnail_url": "https://images.unsplash.com/photo-1516450137525-f8886e844c76?w=800",
            "original_url": "https://instagram.com/p/5678901234",
            "created_at": days(30),
            "likes_count": 543,
            "type": "post",
            "is_cached": True,
        },
        {
            "platform": "youtube",
            "content_id": "6789012345",
            "title": "Modern JavaScript Explained For Beginners",
            "caption": "Get up to speed with modern JavaScript features in this beginner-friendly guide.",
            "thumbnail_url": "https://images.unsplash.com/photo-1519389950473-47ba0277781c?w=800",
            "original_url": "https://youtube.com/watch?v=6789012345",
            "created_at": days(90),
            "views_count": 12800,
            "type": "video",
            "is_cached": True,
        },
    ]


def seed_demo_data(storage: Storage) -> bool:
    """Create the demo user and posts unless the demo user already exists.

    Returns True when data was written.
    """
    if storage.get_user_by_username(DEMO_USER["username"]) is not None:
        logger.info("Demo data already present, skipping seed")
        return False

    storage.create_user({**DEMO_USER, "password": get_password_hash(DEMO_USER["password"])})

    posts = demo_posts()
    for post in posts:
        storage.create_post(post)

    logger.info("Database seeded", users=1, posts=len(posts))
    return True
