import os

# Must be set before the application (and its cached settings) is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("STORAGE_BACKEND", "s3")

import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker

from seenai.db.database import Base, build_engine
from seenai.errors import StorageWriteError
from seenai.main import app
from seenai.schemas.pydantic_schemas import Principal


class FakeStorage:
    """In-memory object storage that records every call."""

    def __init__(self, fail_put=False, fail_delete=False):
        self.blobs = {}
        self.put_calls = []
        self.delete_calls = []
        self.fail_put = fail_put
        self.fail_delete = fail_delete

    async def put(self, path, data, content_type=None):
        self.put_calls.append(path)
        if self.fail_put:
            raise StorageWriteError("bucket unavailable")
        if path in self.blobs:
            raise StorageWriteError(f"{path} already exists")
        self.blobs[path] = data

    def public_url(self, path):
        return f"https://cdn.test/videos/{path}"

    async def delete(self, path):
        self.delete_calls.append(path)
        if self.fail_delete:
            raise StorageWriteError("delete refused")
        self.blobs.pop(path, None)

    def resolve(self, url):
        """Bytes served at a public URL."""
        return self.blobs[url.removeprefix("https://cdn.test/videos/")]


@pytest.fixture(scope="session")
def client():
    """Test client for the FastAPI endpoints"""
    return TestClient(app)


@pytest.fixture
def db_session():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def make_storage():
    return FakeStorage


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def principal():
    return Principal(id="user-1", email="ana@example.com", full_name="Ana")


@pytest.fixture
def make_token():
    def _make(sub="user-1", email="ana@example.com", secret="test-secret", **claims):
        payload = {
            "sub": sub,
            "email": email,
            "user_metadata": {"full_name": "Ana", "avatar_url": "https://cdn.test/ana.png"},
            "exp": datetime.now(timezone.utc) + timedelta(minutes=30),
        }
        payload.update(claims)
        return jwt.encode(payload, secret, algorithm="HS256")
    return _make


@pytest.fixture
def mock_video_data():
    """Row-like data for a freshly uploaded video"""
    return {
        "id": 1,
        "user_id": "user-1",
        "title": "Pitch practice",
        "category": "pitch",
        "description": "Investor pitch, take 3",
        "file_url": "https://cdn.test/videos/user-1/abc.mp4",
        "status": "pending",
        "tone_requested": True,
        "created_at": datetime(2025, 10, 19, 12, 0, tzinfo=timezone.utc),
        "thumbnail_url": None,
        "gpt_notes": None,
        "transcript": None,
        "tone_rating": None,
        "frames": None,
    }
