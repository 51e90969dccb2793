"""Shared fixtures: a throwaway SQLite database and an API test client."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from apparel_api.app.core.config import settings
from apparel_api.app.core.db import init_db
from apparel_api.app.core.security import session_store
from apparel_api.app.main import app


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "apparel.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    # Keep hashing fast in tests.
    monkeypatch.setattr(settings, "password_iterations", 1000)
    init_db()
    return path


@pytest.fixture
def public_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    public = tmp_path / "public_html"
    (public / "img" / "icons").mkdir(parents=True)
    (public / "img" / "icons" / "shirt.svg").write_text("<svg/>")
    (public / "img" / "icons" / "shoe.svg").write_text("<svg/>")
    monkeypatch.setattr(settings, "public_dir", str(public))
    monkeypatch.setattr(settings, "media_dir", str(public / "img" / "user-data"))
    return public


@pytest.fixture
def client(db_path: Path, public_dir: Path):
    session_store.clear()
    with TestClient(app) as test_client:
        yield test_client
    session_store.clear()
