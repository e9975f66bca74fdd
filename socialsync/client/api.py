"""
HTTP client for the SocialSync REST API.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import requests

from ..logging_config import client_logger
from ..schemas import Post, ScheduledPost


class ApiError(Exception):
    """A request failed; ``status_code`` is None when the server was never reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict] = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    @property
    def is_network_error(self) -> bool:
        return self.status_code is None


class ApiClient:
    """Thin wrapper over ``requests.Session`` holding the bearer token."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            client_logger.warning(f"{method} {path} failed", error_message=str(e))
            raise ApiError(f"Network error: {e}") from e

        if response.status_code >= 400:
            message, details = _error_message(response)
            client_logger.warning(
                f"{method} {path} -> {response.status_code}",
                status_code=response.status_code,
                error_message=message,
            )
            raise ApiError(message, response.status_code, details)
        return response

    # -------------------------------------------------------------- session

    def login(self, username: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/api/auth/login", json={"username": username, "password": password}).json()
        self.access_token = data["access_token"]
        self.refresh_token = data.get("refresh_token")
        return data.get("user") or {}

    def logout(self) -> None:
        try:
            self._request("POST", "/api/auth/logout")
        finally:
            self.access_token = None
            self.refresh_token = None

    def session_info(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/session").json()

    def get_user(self) -> Dict[str, Any]:
        return self._request("GET", "/api/user").json()

    # ---------------------------------------------------------------- posts

    def fetch_posts(self, platforms: Optional[Iterable[str]] = None) -> List[Post]:
        params = {}
        if platforms is not None:
            params["platform"] = ",".join(platforms)
        data = self._request("GET", "/api/posts", params=params).json()
        return [Post.model_validate(item) for item in data]

    def set_cached_status(self, post_id: int, is_cached: bool) -> None:
        self._request("POST", "/api/posts/cache", json={"postId": post_id, "isCached": is_cached})

    # ------------------------------------------------------ scheduled posts

    def fetch_scheduled_posts(self) -> List[ScheduledPost]:
        data = self._request("GET", "/api/scheduled-posts").json()
        return [ScheduledPost.model_validate(item) for item in data]

    def create_scheduled_post(
        self,
        platform: str,
        content: str,
        scheduled_for: datetime,
        media_url: Optional[str] = None,
    ) -> ScheduledPost:
        payload = {
            "platform": platform,
            "content": content,
            "scheduled_for": scheduled_for.isoformat(),
        }
        if media_url:
            payload["media_url"] = media_url
        data = self._request("POST", "/api/scheduled-posts", json=payload).json()
        return ScheduledPost.model_validate(data)

    # ------------------------------------------------------------ platforms

    def connect_instagram(self, token: str) -> Dict[str, Any]:
        return self._request("POST", "/api/connect/instagram", json={"token": token}).json()

    def connect_youtube(self, token: str) -> Dict[str, Any]:
        return self._request("POST", "/api/connect/youtube", json={"token": token}).json()


def _error_message(response: requests.Response):
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail") or body.get("message")
        return str(message or f"HTTP {response.status_code}"), body.get("details")
    return f"HTTP {response.status_code}", None
