"""
Pytest fixtures: in-memory database, HTTP client and a fake asset store.

Every test gets a fresh SQLite schema. Requests through the client each open
their own session on the same in-memory database, the way production opens one
session per request.
"""

import json
import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from devevent.api.deps import get_assets
from devevent.db.base import Base
from devevent.db.session import get_db
from devevent.domain.errors import UploadFailedError
from devevent.infrastructure.asset_store import AssetStore
from devevent.main import app
from devevent.models.event import Event
from devevent.repositories.events import EventRepository

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


class FakeAssetStore(AssetStore):
    """Records uploads and hands back predictable URLs."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: list[dict] = []

    async def upload(
        self,
        data: bytes,
        namespace: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        if self.fail:
            raise UploadFailedError("connection reset by peer")
        self.uploads.append(
            {"data": data, "namespace": namespace, "filename": filename, "content_type": content_type}
        )
        return f"https://assets.test/{namespace}/{len(self.uploads)}-{filename}"


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables, yield a session factory, then drop tables."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def asset_store() -> FakeAssetStore:
    return FakeAssetStore()


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, asset_store) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the DB session and asset store dependencies overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_assets] = lambda: asset_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def event_fields() -> dict:
    """A complete, valid set of event fields as an organizer would submit them."""
    return {
        "title": "  PyCon Berlin 2026  ",
        "description": "Three days of talks, sprints and workshops.",
        "overview": "The yearly gathering of the Python community.",
        "image": "https://assets.test/DevEvent/pycon.png",
        "venue": "bcc Berlin Congress Center",
        "location": "Berlin, Germany",
        "date": "March 5, 2026",
        "time": "9:30 AM",
        "mode": "hybrid",
        "audience": "Developers",
        "agenda": ["Keynote", "Talks", "Sprints"],
        "organizer": "Python Software Verband",
        "tags": ["python", "conference"],
    }


@pytest.fixture
def event_form(event_fields) -> dict:
    """The same event as multipart text fields (no image part)."""
    form = {k: v for k, v in event_fields.items() if k != "image"}
    form["tags"] = json.dumps(event_fields["tags"])
    form["agenda"] = json.dumps(event_fields["agenda"])
    return form


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, event_fields) -> Event:
    return await EventRepository(db_session).create(event_fields)
