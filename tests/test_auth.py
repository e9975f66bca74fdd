"""
Tests for authentication endpoints.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from socialsync.auth import (
    authenticate,
    create_access_token,
    create_refresh_token,
    get_password_hash,
    user_id_from_token,
    verify_password,
)
from socialsync.config import Settings
from socialsync.main import create_app

from conftest import TEST_PASSWORD


class TestAuthEndpoints:
    """Test auth endpoints."""

    def test_register_user(self, client, storage):
        """Test user registration."""
        response = client.post(
            "/api/auth/register",
            json={
                "username": "newuser",
                "password": "securepassword123",
                "display_name": "New User",
                "email": "newuser@example.com",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newuser"
        assert data["display_name"] == "New User"
        assert "id" in data
        assert "password" not in data

        stored = storage.get_user_by_username("newuser")
        assert stored.password != "securepassword123"
        assert verify_password("securepassword123", stored.password)

    def test_register_duplicate_username(self, client, test_user):
        """Test registration with an existing username fails."""
        response = client.post(
            "/api/auth/register",
            json={"username": "tester", "password": "anotherpassword"},
        )
        assert response.status_code == 409
        data = response.json()
        assert data["ok"] is False
        assert data["error_code"] == "CONFLICT"

    def test_register_missing_fields(self, client):
        """Test registration reports every missing field."""
        response = client.post("/api/auth/register", json={"display_name": "Nobody"})
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["details"]["errors"]}
        assert fields == {"username", "password"}

    def test_login_success(self, client, test_user):
        """Test successful login."""
        response = client.post(
            "/api/auth/login",
            json={"username": "tester", "password": TEST_PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["id"] == test_user.id

    def test_login_wrong_password(self, client, test_user):
        """Test login with wrong password fails."""
        response = client.post(
            "/api/auth/login",
            json={"username": "tester", "password": "wrongpassword"},
        )
        assert response.status_code == 401

    def test_login_nonexistent_user(self, client):
        """Test login with non-existent user fails."""
        response = client.post(
            "/api/auth/login",
            json={"username": "ghost", "password": "password123"},
        )
        assert response.status_code == 401

    def test_login_blank_credentials(self, client):
        """Test login with blank credentials is a bad request."""
        response = client.post("/api/auth/login", json={"username": "", "password": ""})
        assert response.status_code == 400

    def test_login_missing_credentials(self, client):
        """Test login without a body is a bad request."""
        response = client.post("/api/auth/login", json={})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_session_authenticated(self, client, test_user, auth_headers):
        """Test session info for a logged in caller."""
        response = client.get("/api/auth/session", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {
            "isAuthenticated": True,
            "userId": test_user.id,
            "username": "tester",
        }

    def test_session_anonymous(self, client):
        """Test session info without credentials."""
        response = client.get("/api/auth/session")
        assert response.status_code == 200
        assert response.json() == {"isAuthenticated": False}

    def test_session_with_garbage_token(self, client):
        """Test an invalid token is treated as anonymous."""
        response = client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.json() == {"isAuthenticated": False}

    def test_refresh_token(self, client, test_user):
        """Test refreshing tokens."""
        refresh_token = create_refresh_token({"sub": str(test_user.id)})
        response = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
        assert response.status_code == 200
        assert "access_token" in response.json()

    def test_refresh_rejects_access_token(self, client, test_user):
        """Test an access token cannot be used as a refresh token."""
        access_token = create_access_token({"sub": str(test_user.id)})
        response = client.post("/api/auth/refresh", json={"refresh_token": access_token})
        assert response.status_code == 401

    def test_refresh_unknown_user(self, client):
        """Test refresh for a user that no longer exists."""
        refresh_token = create_refresh_token({"sub": "999"})
        response = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
        assert response.status_code == 401

    def test_logout(self, client, auth_headers):
        """Test logout."""
        response = client.post("/api/auth/logout", headers=auth_headers)
        assert response.status_code == 200

    def test_logout_requires_auth(self, client):
        """Test logout without credentials."""
        response = client.post("/api/auth/logout")
        assert response.status_code == 401


class TestTokenHelpers:
    """Test token and password helpers."""

    def test_expired_token_is_rejected(self, client, test_user):
        """Test an expired access token does not authenticate."""
        token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(seconds=-1))
        response = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_password_hashing(self):
        """Test hashes verify only the original password."""
        hashed = get_password_hash("s3cret")
        assert verify_password("s3cret", hashed)
        assert not verify_password("other", hashed)

    def test_verify_against_non_hash(self):
        """Test a stored value that is not a hash never verifies."""
        assert verify_password("password", "password") is False

    def test_authenticate(self, storage, test_user):
        """Test credentials resolve to their user."""
        assert authenticate(storage, "tester", TEST_PASSWORD) == test_user
        assert authenticate(storage, "tester", "nope") is None
        assert authenticate(storage, "ghost", TEST_PASSWORD) is None

    def test_token_type_is_checked(self):
        """Test refresh and access tokens are not interchangeable."""
        refresh_token = create_refresh_token({"sub": "7"})
        assert user_id_from_token(refresh_token, "refresh") == 7
        assert user_id_from_token(refresh_token) is None
        assert user_id_from_token(create_access_token({"sub": "not-a-number"})) is None


class TestAppSecret:
    """Tokens are signed and checked with the application's own settings."""

    @pytest.fixture
    def other_settings(self):
        return Settings(secret_key="other-secret")

    @pytest.fixture
    def other_client(self, storage, other_settings):
        with TestClient(create_app(storage=storage, settings=other_settings)) as c:
            yield c

    def test_login_token_uses_app_secret(self, other_client, other_settings, test_user):
        """Test issued tokens verify only against the app's secret."""
        response = other_client.post(
            "/api/auth/login",
            json={"username": "tester", "password": TEST_PASSWORD},
        )
        token = response.json()["access_token"]
        assert user_id_from_token(token, settings=other_settings) == test_user.id
        assert user_id_from_token(token) is None

        response = other_client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_token_signed_with_other_secret_is_rejected(self, other_client, auth_headers):
        """Test a token from the process-wide secret does not authenticate."""
        response = other_client.get("/api/user", headers=auth_headers)
        assert response.status_code == 401

    def test_refresh_uses_app_secret(self, other_client, other_settings, test_user):
        """Test refresh accepts only tokens signed with the app's secret."""
        claims = {"sub": str(test_user.id)}
        response = other_client.post(
            "/api/auth/refresh",
            json={"refresh_token": create_refresh_token(claims)},
        )
        assert response.status_code == 401

        response = other_client.post(
            "/api/auth/refresh",
            json={"refresh_token": create_refresh_token(claims, other_settings)},
        )
        assert response.status_code == 200
        assert user_id_from_token(response.json()["access_token"], settings=other_settings) == test_user.id
