"""
Client-side offline mirror of posts the user chose to keep available.

The mirror lives in a small key/value store modelled on browser local
storage. It is best effort: any storage failure is logged and degrades to
"no cache" instead of propagating.

Deciding *when* to read from the mirror (e.g. because the network is down)
is the caller's job; :class:`ConnectivityMonitor` only reports state.
"""
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol

import requests

from ..errors import UnavailableError
from ..logging_config import client_logger
from ..schemas import Post, ensure_utc, utc_now

CACHE_KEY = "socialsync_posts_cache"
LAST_UPDATED_KEY = "socialsync_cache_last_updated"
PROBE_KEY = "socialsync_probe"


# ============================================================
# LOCAL STORES
# ============================================================

class LocalStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryLocalStore:
    """Process-local store, mainly for tests and short-lived clients."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileLocalStore:
    """All keys kept in one JSON document on disk."""

    def __init__(self, path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise UnavailableError(f"Cannot read local store {self.path}: {e}") from e
        try:
            data = json.loads(raw)
        except ValueError as e:
            client_logger.warning("Local store is corrupt, starting empty", path=str(self.path), error_message=str(e))
            return {}
        if not isinstance(data, dict):
            client_logger.warning("Local store is not a JSON object, starting empty", path=str(self.path))
            return {}
        return data

    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise UnavailableError(f"Cannot write local store {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


# ============================================================
# OFFLINE CACHE
# ============================================================

class OfflineCache:
    """Mirror of cached posts keyed by (platform, content_id)."""

    def __init__(self, store: Optional[LocalStore]):
        self._store = store
        self._available = self._probe()

    def _probe(self) -> bool:
        if self._store is None:
            client_logger.warning("No local storage configured for offline cache")
            return False
        try:
            self._store.set_item(PROBE_KEY, "probe")
            self._store.remove_item(PROBE_KEY)
            return True
        except (UnavailableError, OSError) as e:
            client_logger.error("Local storage is not available for caching", error=e)
            return False

    def is_cache_available(self) -> bool:
        return self._available

    def _read_entries(self) -> List[dict]:
        """Stored entries; corrupt data counts as an empty mirror."""
        raw = self._store.get_item(CACHE_KEY)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except ValueError as e:
            client_logger.warning("Offline cache is corrupt, ignoring it", error_message=str(e))
            return []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            client_logger.warning("Offline cache has unexpected shape, ignoring it")
            return []
        return entries

    def _write_entries(self, entries: List[dict]) -> None:
        self._store.set_item(CACHE_KEY, json.dumps(entries))
        self._store.set_item(LAST_UPDATED_KEY, utc_now().isoformat())

    def get_cached_posts(self, platforms: Optional[Iterable[str]] = None) -> List[Post]:
        """Mirrored posts, optionally limited to ``platforms``. Never raises."""
        if not self._available:
            return []

        try:
            posts = [Post.model_validate(entry) for entry in self._read_entries()]
        except UnavailableError as e:
            client_logger.error("Error reading from cache", error=e)
            return []
        except ValueError as e:
            client_logger.warning("Offline cache holds invalid posts, ignoring it", error_message=str(e))
            return []

        wanted = set(platforms or ())
        if wanted:
            posts = [p for p in posts if p.platform in wanted]
        return posts

    def set_cached_post(self, post: Post) -> None:
        """Insert or replace the mirrored copy of ``post``."""
        if not self._available:
            return

        entry = post.model_copy(update={"is_cached": True}).model_dump(mode="json")
        try:
            entries = self._read_entries()
            for index, existing in enumerate(entries):
                if (existing.get("platform"), existing.get("content_id")) == (post.platform, post.content_id):
                    entries[index] = entry
                    break
            else:
                entries.append(entry)
            self._write_entries(entries)
        except UnavailableError as e:
            client_logger.error("Error writing to cache", error=e, post_id=post.id)

    def remove_cached_post(self, post_id: int) -> None:
        if not self._available:
            return

        try:
            entries = self._read_entries()
            remaining = [e for e in entries if e.get("id") != post_id]
            if len(remaining) != len(entries):
                self._write_entries(remaining)
        except UnavailableError as e:
            client_logger.error("Error removing from cache", error=e, post_id=post_id)

    def clear_cache(self) -> None:
        if not self._available:
            return

        try:
            self._store.remove_item(CACHE_KEY)
            self._store.remove_item(LAST_UPDATED_KEY)
        except UnavailableError as e:
            client_logger.error("Error clearing cache", error=e)

    def get_cache_last_updated(self) -> Optional[datetime]:
        if not self._available:
            return None

        try:
            raw = self._store.get_item(LAST_UPDATED_KEY)
            return ensure_utc(datetime.fromisoformat(raw)) if raw else None
        except UnavailableError as e:
            client_logger.error("Error getting cache timestamp", error=e)
            return None
        except ValueError:
            client_logger.warning("Offline cache timestamp is invalid", value=raw)
            return None


# ============================================================
# CONNECTIVITY
# ============================================================

Listener = Callable[[bool], None]


class ConnectivityMonitor:
    """Tracks online/offline state and notifies subscribers on change."""

    def __init__(self, online: bool = True):
        self._online = online
        self._listeners: List[Listener] = []

    @property
    def is_online(self) -> bool:
        return self._online

    @property
    def state(self) -> str:
        return "online" if self._online else "offline"

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        client_logger.info("Connectivity changed", state=self.state)
        for listener in list(self._listeners):
            listener(online)

    def check(self, url: str, timeout: float = 3.0) -> bool:
        """Probe ``url`` and update the state from the outcome."""
        try:
            requests.head(url, timeout=timeout)
            online = True
        except requests.RequestException:
            online = False
        self.set_online(online)
        return online
