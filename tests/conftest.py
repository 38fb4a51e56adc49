"""Shared fixtures: in-memory database, fake media host and an app wired to both."""

import base64
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import vidtube.config
from vidtube.api import (
    comments_router,
    health_router,
    likes_router,
    playlists_router,
    subscriptions_router,
    tweets_router,
    users_router,
    videos_router,
)
from vidtube.api.dependencies import get_media_host, limiter
from vidtube.api.responses import install_exception_handlers
from vidtube.auth.router import router as auth_router
from vidtube.auth.security import create_access_token, hash_password
from vidtube.db.models import Base, User, Video
from vidtube.db.session import enable_sqlite_foreign_keys, get_session
from vidtube.media import MediaAsset, MediaHostError

TEST_ENV = {
    "VT_ACCESS_TOKEN_SECRET": "test-access-secret",
    "VT_REFRESH_TOKEN_SECRET": "test-refresh-secret",
    "VT_TOKEN_ENC_KEY": base64.b64encode(b"0" * 32).decode(),
    "VT_ENV": "dev",
}

PASSWORD = "correct-horse"


class FakeMediaHost:
    """Stands in for MediaHostClient and records what it was asked to do."""

    def __init__(self):
        self.uploads: list[tuple[str, str]] = []
        self.deleted: list[tuple[str, str]] = []
        self.fail_uploads = False

    async def upload(self, local_path, resource_type="auto") -> MediaAsset:
        if self.fail_uploads:
            raise MediaHostError("Upload failed")
        public_id = f"asset-{len(self.uploads) + 1}"
        self.uploads.append((Path(local_path).name, resource_type))
        is_video = resource_type == "video"
        return MediaAsset(
            public_id=public_id,
            url=f"https://media.test/{public_id}",
            resource_type="video" if is_video else "image",
            duration=12.5 if is_video else None,
        )

    async def delete(self, public_id, resource_type="image") -> bool:
        if not public_id:
            return False
        self.deleted.append((public_id, resource_type))
        return True


@pytest.fixture(autouse=True)
def settings(monkeypatch, tmp_path):
    """Test settings from the environment, rebuilt for every test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("VT_UPLOAD_TMP_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(vidtube.config, "_settings", None)
    limiter.reset()
    return vidtube.config.get_settings()


@pytest_asyncio.fixture
async def sessionmaker():
    """Create an in-memory test database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def media():
    return FakeMediaHost()


@pytest.fixture
def app(sessionmaker, media):
    """The API routers with the database and media host swapped for test doubles."""
    app = FastAPI()
    app.state.limiter = limiter
    install_exception_handlers(app)
    for router in (
        health_router,
        auth_router,
        users_router,
        videos_router,
        comments_router,
        likes_router,
        tweets_router,
        playlists_router,
        subscriptions_router,
    ):
        app.include_router(router)

    async def override_session():
        async with sessionmaker() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_media_host] = lambda: media
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(sessionmaker):
    """Factory inserting a user whose password is PASSWORD."""

    async def _make(username: str = "ana", **extra) -> User:
        async with sessionmaker() as session:
            user = User(
                username=username,
                email=f"{username}@example.com",
                full_name=username.title(),
                password=hash_password(PASSWORD),
                avatar_public_id=f"avatar-{username}",
                avatar_url=f"https://media.test/avatar-{username}",
                **extra,
            )
            session.add(user)
            await session.commit()
        return user

    return _make


@pytest.fixture
def make_video(sessionmaker):
    """Factory inserting a video owned by the given user."""

    async def _make(owner: User, title: str = "A video", **extra) -> Video:
        fields = {
            "description": f"About {title}",
            "duration": 60.0,
            "is_published": True,
            "video_file_public_id": f"file-{title}",
            "video_file_url": f"https://media.test/file-{title}",
            "thumbnail_public_id": f"thumb-{title}",
            "thumbnail_url": f"https://media.test/thumb-{title}",
            **extra,
        }
        async with sessionmaker() as session:
            video = Video(title=title, owner_id=owner.id, **fields)
            session.add(video)
            await session.commit()
        return video

    return _make


@pytest.fixture
def auth_headers(settings):
    """Build a bearer header carrying a fresh access token for the user."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(
            user, settings.access_token_secret, settings.access_token_expiry_minutes
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
