"""Shared pytest fixtures for all tests."""

import base64
import io
import time
from typing import Callable, Dict, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from files_manager.artifact_storage import ArtifactStorage
from files_manager.database import Database
from files_manager.main import create_app
from files_manager.repositories.file_repository import FileRepository
from files_manager.repositories.user_repository import UserRepository
from files_manager.sessions import SessionStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeKeyValueStore:
    """
    In-memory stand-in for Redis honouring per-key TTLs.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.data: Dict[str, Tuple[str, float]] = {}
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self.clock():
            del self.data[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.data[key] = (value, self.clock() + ttl_seconds)

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kv_store(clock):
    return FakeKeyValueStore(clock=clock)


@pytest.fixture
def database(tmp_path) -> Database:
    """
    Create a temporary database with schema for each test.
    """
    db = Database(str(tmp_path / "db" / "metadata.db"))
    db.init_schema()
    return db


@pytest.fixture
def artifacts(tmp_path) -> ArtifactStorage:
    return ArtifactStorage(str(tmp_path / "files"))


@pytest.fixture
def user_repo(database) -> UserRepository:
    return UserRepository(database)


@pytest.fixture
def file_repo(database) -> FileRepository:
    return FileRepository(database)


@pytest.fixture
def sessions(kv_store) -> SessionStore:
    return SessionStore(kv_store, ttl_seconds=60)


@pytest.fixture
def app(database, kv_store, artifacts):
    return create_app(
        database=database,
        kv_store=kv_store,
        artifacts=artifacts,
        thumbnail_concurrency=2,
        welcome_concurrency=2,
        job_timeout=10,
    )


@pytest.fixture
def client(app):
    """
    Test client with the application lifespan (and its pipelines) running.
    """
    with TestClient(app) as test_client:
        yield test_client


def basic_auth(email: str, password: str) -> Dict[str, str]:
    encoded = base64.b64encode(f"{email}:{password}".encode()).decode()
    return {"Authorization": f"Basic {encoded}"}


def encode(data: bytes) -> str:
    return base64.b64encode(data).decode()


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.05) -> bool:
    """Poll predicate until it holds or timeout elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def register_and_login(client):
    """
    Factory creating an account and returning (user_id, X-Token headers).
    """
    def _register_and_login(email: str, password: str = "supersecretFYI") -> Tuple[str, Dict[str, str]]:
        response = client.post("/users", json={"email": email, "password": password})
        assert response.status_code == 201
        user_id = response.json()["id"]

        response = client.get("/connect", headers=basic_auth(email, password))
        assert response.status_code == 200
        return user_id, {"X-Token": response.json()["token"]}

    return _register_and_login


@pytest.fixture
def png_bytes() -> bytes:
    """A real 600x300 PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (600, 300), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
