from .api import ApiClient, ApiError
from .dashboard import ActionResult, Dashboard, LoadResult, build_dashboard
from .offline_cache import (
    CACHE_KEY,
    LAST_UPDATED_KEY,
    ConnectivityMonitor,
    FileLocalStore,
    LocalStore,
    MemoryLocalStore,
    OfflineCache,
)
from .pipeline import FilterType, apply_filters, engagement

__all__ = [
    "ApiClient", "ApiError",
    "ActionResult", "Dashboard", "LoadResult", "build_dashboard",
    "CACHE_KEY", "LAST_UPDATED_KEY", "ConnectivityMonitor", "FileLocalStore",
    "LocalStore", "MemoryLocalStore", "OfflineCache",
    "FilterType", "apply_filters", "engagement",
]
