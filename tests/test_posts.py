"""
Tests for posts endpoints.
"""
from datetime import datetime, timedelta, timezone

import pytest

from socialsync.routes.posts import parse_platform_filter

from conftest import post_payload


@pytest.fixture
def posts(storage):
    """Two Instagram posts and one YouTube video."""
    t0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return [
        storage.create_post(post_payload(content_id="ig-1", created_at=t0 - timedelta(days=2))),
        storage.create_post(post_payload(
            platform="youtube", content_id="yt-1", created_at=t0 - timedelta(days=1),
            title="Coding tips", caption=None, views_count=100, type="video",
        )),
        storage.create_post(post_payload(content_id="ig-2", created_at=t0, caption="Sunset")),
    ]


class TestPlatformFilterParsing:
    """Test the platform query parameter."""

    @pytest.mark.parametrize("raw,expected", [
        (None, None),
        ("", None),
        ("  ", None),
        ("instagram", ["instagram"]),
        ("youtube,instagram", ["instagram", "youtube"]),
        (" YouTube , ", ["youtube"]),
        ("tiktok", []),
        ("tiktok,youtube", ["youtube"]),
    ])
    def test_parse(self, raw, expected):
        assert parse_platform_filter(raw) == expected


class TestPostsEndpoints:
    """Test posts endpoints."""

    def test_get_posts_empty(self, client):
        """Test getting posts when none exist."""
        response = client.get("/api/posts")
        assert response.status_code == 200
        assert response.json() == []

    def test_get_posts_newest_first(self, client, posts):
        """Test posts come back newest first."""
        response = client.get("/api/posts")
        assert response.status_code == 200
        assert [p["content_id"] for p in response.json()] == ["ig-2", "yt-1", "ig-1"]

    def test_get_posts_by_platform(self, client, posts):
        """Test filtering posts by a single platform."""
        response = client.get("/api/posts", params={"platform": "youtube"})
        data = response.json()
        assert [p["content_id"] for p in data] == ["yt-1"]
        assert data[0]["title"] == "Coding tips"

    def test_get_posts_by_several_platforms(self, client, posts):
        """Test a comma separated platform list."""
        response = client.get("/api/posts", params={"platform": "instagram,youtube"})
        assert len(response.json()) == 3

    def test_get_posts_unknown_platform(self, client, posts):
        """Test an unknown platform matches nothing."""
        response = client.get("/api/posts", params={"platform": "tiktok"})
        assert response.status_code == 200
        assert response.json() == []

    def test_get_post(self, client, posts):
        """Test getting a single post."""
        response = client.get(f"/api/posts/{posts[1].id}")
        assert response.status_code == 200
        data = response.json()
        assert data["platform"] == "youtube"
        assert data["views_count"] == 100
        assert data["is_cached"] is False

    def test_get_post_not_found(self, client):
        """Test getting a missing post."""
        response = client.get("/api/posts/9999")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_create_post(self, client, auth_headers):
        """Test ingesting a post."""
        response = client.post(
            "/api/posts",
            headers=auth_headers,
            json={
                "platform": "instagram",
                "content_id": "new-1",
                "caption": "Fresh",
                "type": "photo",
                "metadata": {"tags": ["fresh"]},
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["id"] >= 1
        assert data["metadata"] == {"tags": ["fresh"]}
        assert data["created_at"]

    def test_create_post_unauthenticated(self, client):
        """Test creating a post without auth fails."""
        response = client.post("/api/posts", json=post_payload(created_at=None))
        assert response.status_code == 401

    def test_create_post_invalid(self, client, auth_headers):
        """Test every invalid field is reported."""
        response = client.post(
            "/api/posts",
            headers=auth_headers,
            json={"platform": "tiktok", "likes_count": "many"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        fields = {e["field"] for e in data["details"]["errors"]}
        assert fields == {"platform", "content_id", "type", "likes_count"}

    def test_create_duplicate_post(self, client, auth_headers, posts):
        """Test the same platform content cannot be stored twice."""
        response = client.post(
            "/api/posts",
            headers=auth_headers,
            json={"platform": "instagram", "content_id": "ig-1", "type": "post"},
        )
        assert response.status_code == 409

    def test_update_post(self, client, auth_headers, posts):
        """Test partially updating a post."""
        response = client.patch(
            f"/api/posts/{posts[0].id}",
            headers=auth_headers,
            json={"likes_count": 500},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["likes_count"] == 500
        assert data["caption"] == "Beach day"

    def test_update_post_not_found(self, client, auth_headers):
        """Test updating a missing post."""
        response = client.patch("/api/posts/9999", headers=auth_headers, json={"caption": "x"})
        assert response.status_code == 404

    def test_delete_post(self, client, auth_headers, posts):
        """Test deleting a post."""
        response = client.delete(f"/api/posts/{posts[0].id}", headers=auth_headers)
        assert response.status_code == 200

        response = client.get(f"/api/posts/{posts[0].id}")
        assert response.status_code == 404

    def test_delete_post_unauthenticated(self, client, posts):
        """Test deleting a post without auth fails."""
        response = client.delete(f"/api/posts/{posts[0].id}")
        assert response.status_code == 401


class TestCacheToggle:
    """Test the offline cache flag endpoint."""

    def test_cache_post(self, client, storage, posts):
        """Test marking a post as cached."""
        response = client.post("/api/posts/cache", json={"postId": posts[0].id, "isCached": True})
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert storage.get_post_by_id(posts[0].id).is_cached is True

    def test_uncache_post(self, client, storage, posts):
        """Test clearing the cached flag."""
        storage.set_cached_status(posts[0].id, True)
        response = client.post("/api/posts/cache", json={"postId": posts[0].id, "isCached": False})
        assert response.status_code == 200
        assert storage.get_post_by_id(posts[0].id).is_cached is False

    def test_cache_missing_post(self, client, storage, posts):
        """Test caching a missing post leaves everything untouched."""
        before = storage.get_posts()
        response = client.post("/api/posts/cache", json={"postId": 9999, "isCached": True})
        assert response.status_code == 404
        assert storage.get_posts() == before

    @pytest.mark.parametrize("body", [
        {"postId": "1", "isCached": True},
        {"postId": 1, "isCached": "yes"},
        {"postId": 1},
        {},
    ])
    def test_cache_bad_body(self, client, posts, body):
        """Test the body must carry an integer id and a boolean."""
        response = client.post("/api/posts/cache", json=body)
        assert response.status_code == 400
