"""
Pytest configuration and fixtures for the MedGram API tests.
"""
import os

# Must be set before medgram is imported: medgram.main builds an app at import.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from medgram.core.config import Settings
from medgram.core.security import build_password_context
from medgram.main import create_app
from medgram.models.post import Post, PostType, ProcessingStatus
from medgram.models.user import User, UserRole
from medgram.utils.storage import MediaUploadCoordinator


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        JWT_SECRET_KEY="test-secret",
        BCRYPT_ROUNDS=4,
        LOG_TO_FILE=False,
        MINIO_ENDPOINT="storage.internal",
        MINIO_PORT=9000,
        MINIO_ROOT_USER="test-access-key",
        MINIO_ROOT_PASSWORD="test-secret-key",
        MINIO_PUBLIC_URL="https://media.example.org",
    )


@pytest.fixture
def pwd_context():
    return build_password_context(4)


@pytest_asyncio.fixture
async def app(settings: Settings):
    """Fresh application with its own in-memory database."""
    app = create_app(settings)
    await app.state.database.create_tables()
    yield app
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def db(app) -> AsyncGenerator[AsyncSession, None]:
    """Session on the same database the app under test uses."""
    async with app.state.database.session() as session:
        yield session


@pytest.fixture
def media(settings: Settings) -> MediaUploadCoordinator:
    return MediaUploadCoordinator(settings, clock=lambda: 1_700_000_000.123)


async def register(client: AsyncClient, username: str, role: str = "USER", password: str = "pw1") -> dict:
    response = await client.post(
        "/auth/register",
        json={
            "username": username,
            "password": password,
            "fullName": f"{username} full name",
            "role": role,
            "npiNumber": "1234567890",
        },
    )
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def author(db: AsyncSession, pwd_context) -> User:
    user = User(
        username="author",
        password_hash=pwd_context.hash("pw1"),
        full_name="Author",
        role=UserRole.CREATOR,
        avatar_url="https://ui-avatars.com/api/?name=author",
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def add_post(
    db: AsyncSession,
    user: User,
    created_at: datetime,
    type: PostType = PostType.TEXT,
    status: ProcessingStatus | None = ProcessingStatus.COMPLETED,
    content: str = "hello",
) -> Post:
    post = Post(
        user_id=user.id,
        type=type,
        content=content,
        processing_status=status,
        created_at=created_at,
    )
    db.add(post)
    await db.commit()
    await db.refresh(post)
    return post


def minutes_ago(minutes: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(minutes=minutes)
