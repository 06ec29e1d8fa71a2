"""
Pytest configuration and fixtures for messaging service testing.
Provides database, Redis, service and HTTP client fixtures with proper cleanup.
"""
import os

# Settings are read on import; these must be set before the app is loaded
os.environ.setdefault("SECRET_KEY", "test-signing-key-for-the-messaging-suite-abcdefghij")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_JSON", "false")

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Awaitable, Callable
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient
import fakeredis.aioredis

from messaging_service.main import app
from messaging_service.core.database import get_db
from messaging_service.core.redis import CacheService, get_cache_service
from messaging_service.models import Base, Message, User
from messaging_service.services import AuthService, MessageService, TokenService

from tests.factories import DEFAULT_PASSWORD, MessageFactory, RegistrationPayloadFactory, UserFactory

# In-memory database shared by every session through StaticPool
TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_KEY_PREFIX = "test:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def fake_redis():
    """Create a fake Redis instance for testing."""
    client = fakeredis.aioredis.FakeRedis()
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def cache_service(fake_redis) -> CacheService:
    return CacheService(fake_redis, key_prefix=TEST_KEY_PREFIX)


@pytest.fixture
def token_service(cache_service) -> TokenService:
    return TokenService(cache_service)


@pytest.fixture
def auth_service(token_service) -> AuthService:
    return AuthService(token_service)


@pytest.fixture
def message_service(token_service) -> MessageService:
    return MessageService(token_service)


@pytest.fixture
def mock_cache_service():
    """Mock cache service."""
    mock = AsyncMock()
    mock.set.return_value = True
    mock.exists.return_value = False
    return mock


@pytest.fixture
def override_get_db(session_factory):
    """Override the database dependency with the test engine."""
    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
    return _override_get_db


@pytest_asyncio.fixture
async def async_client(override_get_db, cache_service) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_service] = lambda: cache_service

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Persist a user built by UserFactory; the password is DEFAULT_PASSWORD."""
    async def _create_user(**kwargs) -> User:
        user = UserFactory.build(**kwargs)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest.fixture
def create_message(db_session: AsyncSession) -> Callable[..., Awaitable[Message]]:
    async def _create_message(sender: User, receiver: User, **kwargs) -> Message:
        message = MessageFactory.build(sender=sender.id, receiver=receiver.id, **kwargs)
        db_session.add(message)
        await db_session.commit()
        await db_session.refresh(message)
        return message
    return _create_message


@pytest_asyncio.fixture
async def test_user(create_user) -> User:
    """Create a test user."""
    return await create_user(name="Alice Sender", email="alice@example.com")


@pytest_asyncio.fixture
async def other_user(create_user) -> User:
    """Create a second user to talk to."""
    return await create_user(name="Bob Receiver", email="bob@example.com")


@pytest_asyncio.fixture
async def third_user(create_user) -> User:
    return await create_user(name="Carol Bystander", email="carol@example.com")


@pytest.fixture
def auth_headers(token_service) -> Callable[[User], dict]:
    """Bearer headers for a freshly issued token."""
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {token_service.issue(user.id)}"}
    return _auth_headers


@pytest.fixture
def registration_data() -> dict:
    """Valid registration request data."""
    return RegistrationPayloadFactory()


@pytest.fixture
def valid_login_data() -> dict:
    """Valid login request data for test_user."""
    return {"email": "alice@example.com", "password": DEFAULT_PASSWORD}
