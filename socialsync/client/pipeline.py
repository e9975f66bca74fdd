"""
Filter/sort pipeline turning a post collection into the displayed list.

Stages run in a fixed order: search, then one categorical filter, then an
optional sort. Nothing here mutates its input.
"""
from enum import Enum
from typing import Iterable, List, Union

from ..schemas import Post


class FilterType(str, Enum):
    """Dashboard filter tabs"""
    ALL = "all"
    RECENT = "recent"
    POPULAR = "popular"
    PHOTO = "photo"
    VIDEO = "video"
    CACHED = "cached"
    INSTAGRAM = "instagram"
    YOUTUBE = "youtube"


PHOTO_TYPES = frozenset({"photo", "image"})
SORT_FILTERS = frozenset({FilterType.RECENT, FilterType.POPULAR})


def engagement(post: Post) -> int:
    """Likes for Instagram, views for YouTube; missing counts are zero."""
    if post.platform == "instagram":
        return post.likes_count or 0
    return post.views_count or 0


def matches_search(post: Post, query: str) -> bool:
    """Case-insensitive substring match on caption, title or platform."""
    fields = (post.caption, post.title, post.platform)
    return any(query in field.lower() for field in fields if field)


def _keep(post: Post, active: FilterType) -> bool:
    if active is FilterType.PHOTO:
        return post.type in PHOTO_TYPES
    if active is FilterType.VIDEO:
        return post.type == "video"
    if active is FilterType.CACHED:
        return bool(post.is_cached)
    if active in (FilterType.INSTAGRAM, FilterType.YOUTUBE):
        return post.platform == active.value
    return True


def apply_filters(
    posts: Iterable[Post],
    search: str = "",
    active_filter: Union[FilterType, str] = FilterType.ALL,
) -> List[Post]:
    active = FilterType(active_filter)
    result = list(posts)

    query = (search or "").strip().lower()
    if query:
        result = [p for p in result if matches_search(p, query)]

    result = [p for p in result if _keep(p, active)]

    # sorted() is stable, so ties keep their incoming order
    if active is FilterType.RECENT:
        result = sorted(result, key=lambda p: p.created_at, reverse=True)
    elif active is FilterType.POPULAR:
        result = sorted(result, key=engagement, reverse=True)

    return result
