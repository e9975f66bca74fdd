"""
Dashboard controller: the caller that combines the API, the offline mirror
and the filter pipeline, and decides when the mirror stands in for the
network.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional

from ..config import Settings, get_settings
from ..logging_config import client_logger
from ..schemas import PLATFORMS, Post, ensure_utc, utc_now
from .api import ApiClient, ApiError
from .offline_cache import ConnectivityMonitor, FileLocalStore, OfflineCache
from .pipeline import FilterType, apply_filters


@dataclass
class LoadResult:
    """Outcome of loading posts"""
    posts: List[Post]
    from_cache: bool = False
    error: Optional[str] = None
    retryable: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ActionResult:
    """Outcome of a user-initiated write"""
    ok: bool
    message: str
    data: Any = None
    errors: List[dict] = field(default_factory=list)


class Dashboard:
    def __init__(
        self,
        api: ApiClient,
        cache: OfflineCache,
        monitor: Optional[ConnectivityMonitor] = None,
    ):
        self.api = api
        self.cache = cache
        self.monitor = monitor or ConnectivityMonitor()
        self.selected_platforms: List[str] = list(PLATFORMS)
        self.active_filter = FilterType.ALL
        self.search = ""
        self.posts: List[Post] = []

    def toggle_platform(self, platform: str) -> List[str]:
        """Select or deselect a platform; the last selected one stays selected."""
        if platform in self.selected_platforms:
            if len(self.selected_platforms) > 1:
                self.selected_platforms = [p for p in self.selected_platforms if p != platform]
        elif platform in PLATFORMS:
            self.selected_platforms = [p for p in PLATFORMS if p in self.selected_platforms or p == platform]
        return self.selected_platforms

    def load_posts(self) -> LoadResult:
        try:
            self.posts = self.api.fetch_posts(self.selected_platforms)
            return LoadResult(posts=self.posts)
        except ApiError as e:
            client_logger.warning("Failed to fetch posts", error_message=e.message, status_code=e.status_code)

            if e.is_network_error and not self.monitor.is_online and self.cache.is_cache_available():
                self.posts = self.cache.get_cached_posts(self.selected_platforms)
                client_logger.info("Offline, showing cached posts", count=len(self.posts))
                return LoadResult(posts=self.posts, from_cache=True)

            return LoadResult(posts=[], error=f"Failed to load posts: {e.message}", retryable=True)

    def load_more(self) -> LoadResult:
        """Simulated pagination: everything was fetched up front."""
        return LoadResult(posts=self.posts, error="No more posts to load", retryable=False)

    def visible_posts(self) -> List[Post]:
        return apply_filters(self.posts, self.search, self.active_filter)

    def toggle_cache(self, post_id: int, is_cached: bool) -> ActionResult:
        try:
            self.api.set_cached_status(post_id, is_cached)
        except ApiError as e:
            client_logger.warning("Failed to update cache status", post_id=post_id, error_message=e.message)
            return ActionResult(ok=False, message=f"Failed to update cache: {e.message}")

        for index, post in enumerate(self.posts):
            if post.id == post_id:
                self.posts[index] = post.model_copy(update={"is_cached": is_cached})
                if is_cached:
                    self.cache.set_cached_post(self.posts[index])
                break
        if not is_cached:
            self.cache.remove_cached_post(post_id)

        if is_cached:
            return ActionResult(ok=True, message="This post will be available offline")
        return ActionResult(ok=True, message="This post won't be available offline anymore")

    def submit_scheduled_post(self, draft: Mapping[str, Any]) -> ActionResult:
        """Validate and submit a scheduling form; ``draft`` is left untouched."""
        errors = []
        if draft.get("platform") not in PLATFORMS:
            errors.append({"field": "platform", "message": "Choose instagram or youtube"})
        if not (draft.get("content") or "").strip():
            errors.append({"field": "content", "message": "Content is required"})

        scheduled_for = _parse_datetime(draft.get("scheduled_for"))
        if scheduled_for is None:
            errors.append({"field": "scheduled_for", "message": "A valid date and time is required"})
        elif scheduled_for <= utc_now():
            errors.append({"field": "scheduled_for", "message": "Scheduled time must be in the future"})

        if errors:
            fields = ", ".join(e["field"] for e in errors)
            return ActionResult(ok=False, message=f"Please fix: {fields}", data=dict(draft), errors=errors)

        try:
            created = self.api.create_scheduled_post(
                platform=draft["platform"],
                content=draft["content"],
                scheduled_for=scheduled_for,
                media_url=draft.get("media_url") or None,
            )
        except ApiError as e:
            client_logger.warning("Failed to create scheduled post", error_message=e.message)
            server_errors = (e.details or {}).get("errors", [])
            return ActionResult(
                ok=False,
                message=f"Failed to schedule post: {e.message}",
                data=dict(draft),
                errors=server_errors,
            )

        return ActionResult(ok=True, message="Post scheduled", data=created)


def _parse_datetime(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and value:
        try:
            return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def build_dashboard(settings: Optional[Settings] = None) -> Dashboard:
    """Wire a dashboard to the configured API and an on-disk offline mirror."""
    settings = settings or get_settings()
    api = ApiClient(settings.api_base_url, timeout=settings.request_timeout)
    cache = OfflineCache(FileLocalStore(settings.offline_cache_path))
    return Dashboard(api, cache)
