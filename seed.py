"""
Seed the configured database with the demo user and demo posts.

Usage:
    STORAGE_BACKEND=database DATABASE_URL=sqlite:///./socialsync.db python seed.py
"""
from socialsync.config import get_settings
from socialsync.seed import seed_demo_data
from socialsync.storage import build_storage

settings = get_settings()
if settings.storage_backend != "database":
    raise SystemExit("Seeding only makes sense for STORAGE_BACKEND=database")

storage = build_storage(settings)

if seed_demo_data(storage):
    print("Database seeded successfully!")
    print("  - demo user (username: demo)")
    print(f"  - {len(storage.get_posts())} posts")
else:
    print("Demo data already present, nothing to do.")
