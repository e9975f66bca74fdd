"""
Tests for demo data seeding and application startup wiring.
"""
import runpy
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from socialsync.auth import verify_password
from socialsync.config import Settings
from socialsync.main import create_app
from socialsync.seed import DEMO_USER, demo_posts, seed_demo_data
from socialsync.storage import MemStorage, build_storage


class TestSeed:
    """Test demo data seeding."""

    def test_seed_creates_user_and_posts(self, storage):
        """Test seeding an empty store."""
        assert seed_demo_data(storage) is True

        user = storage.get_user_by_username("demo")
        assert user.display_name == DEMO_USER["display_name"]
        assert verify_password("password", user.password)

        posts = storage.get_posts()
        assert len(posts) == len(demo_posts())
        assert {p.platform for p in posts} == {"instagram", "youtube"}

    def test_seed_is_idempotent(self, storage):
        """Test seeding twice writes nothing the second time."""
        seed_demo_data(storage)
        assert seed_demo_data(storage) is False
        assert len(storage.get_posts()) == len(demo_posts())

    def test_demo_posts_are_newest_first_after_storage(self, storage):
        """Test stored demo posts come back in descending time order."""
        seed_demo_data(storage)
        posts = storage.get_posts()
        assert posts == sorted(posts, key=lambda p: p.created_at, reverse=True)


class TestAppFactory:
    """Test building the application from settings."""

    def test_memory_backend_seeded_on_startup(self):
        """Test the default app serves demo posts."""
        app = create_app(settings=Settings(storage_backend="memory", seed_demo_data=True))
        with TestClient(app) as client:
            response = client.get("/api/posts", params={"platform": "youtube"})
            assert response.status_code == 200
            assert len(response.json()) == 3
            assert client.get("/api/health").json()["storage_backend"] == "memory"

    def test_seeding_can_be_disabled(self):
        """Test an unseeded app starts empty."""
        app = create_app(settings=Settings(seed_demo_data=False))
        with TestClient(app) as client:
            assert client.get("/api/posts").json() == []

    def test_database_backend(self):
        """Test the relational backend is selected from settings."""
        storage = build_storage(Settings(storage_backend="database", database_url="sqlite:///:memory:"))
        assert storage.backend_name == "database"
        assert seed_demo_data(storage) is True

    def test_explicit_storage_is_not_seeded(self):
        """Test a supplied storage is used as-is."""
        storage = MemStorage()
        app = create_app(storage=storage, settings=Settings(seed_demo_data=True))
        assert app.state.storage is storage
        assert storage.get_posts() == []

    def test_unknown_backend_rejected(self):
        """Test an unknown backend name fails fast."""
        with pytest.raises(ValueError):
            create_app(settings=Settings(storage_backend="redis"))


class TestSeedScript:
    """Test the root seed script."""

    SCRIPT = Path(__file__).resolve().parent.parent / "seed.py"

    def test_seeds_once(self, tmp_path, monkeypatch, capsys):
        """Test the script seeds a database backend and reports what it did."""
        settings = Settings(storage_backend="database", database_url=f"sqlite:///{tmp_path / 'seed.db'}")
        monkeypatch.setattr("socialsync.config.get_settings", lambda: settings)

        runpy.run_path(str(self.SCRIPT))
        out = capsys.readouterr().out
        assert "  - demo user (username: demo)" in out
        assert f"  - {len(demo_posts())} posts" in out

        runpy.run_path(str(self.SCRIPT))
        assert "already present" in capsys.readouterr().out

    def test_refuses_memory_backend(self, monkeypatch):
        """Test the script will not seed the ephemeral backend."""
        monkeypatch.setattr("socialsync.config.get_settings", lambda: Settings(storage_backend="memory"))
        with pytest.raises(SystemExit):
            runpy.run_path(str(self.SCRIPT))
