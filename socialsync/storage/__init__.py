"""
Storage backends and startup-time backend selection.
"""
from ..config import Settings
from ..database import build_engine, build_session_factory, init_db
from ..logging_config import storage_logger
from .base import UNSET, Storage, token_changes
from .memory import MemStorage
from .sql import DatabaseStorage


def build_storage(settings: Settings) -> Storage:
    """Construct the backend named by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        storage = MemStorage()
    elif settings.storage_backend == "database":
        engine = build_engine(settings.database_url)
        init_db(engine)
        storage = DatabaseStorage(build_session_factory(engine))
    else:
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")

    storage_logger.info("Storage initialised", backend=settings.storage_backend)
    return storage


__all__ = [
    "UNSET",
    "Storage",
    "token_changes",
    "MemStorage",
    "DatabaseStorage",
    "build_storage",
]
