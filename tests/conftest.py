"""
Test configuration and fixtures
FastAPI + SQLAlchemy async (SQLite via aiosqlite) + pytest-asyncio
"""

import os
import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession
from httpx import AsyncClient, ASGITransport

# Set test environment before the app reads its settings
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-fastbreak-test-suite-0123456789"
os.environ["LOG_LEVEL"] = "WARNING"

from app.core.database import build_engine, build_session_factory, create_tables
from app.models.user import User
from app.models.event import Event, SportType
from app.models.venue import Venue
from app.core.security import AuthService, get_password_hash
from app.services.event_service import EventService


class InMemoryRedis:
    """Just enough of the redis client for session revocation"""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    async def ping(self):
        return True


TEST_PASSWORD = "TestPass123!"


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Create a file-backed SQLite engine per test"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@pytest.fixture
def redis_client():
    return InMemoryRedis()


@pytest.fixture
def auth_service(session_factory, redis_client):
    async def provider():
        return redis_client

    return AuthService(session_factory=session_factory, redis_provider=provider)


@pytest_asyncio.fixture
async def client(db_session, auth_service):
    """Create test client with dependency overrides"""
    from app.main import app
    from app.core.database import get_session

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    original_auth = app.state.auth_service
    app.state.auth_service = auth_service

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        app.state.auth_service = original_auth


async def create_user(db_session, email: str = None) -> User:
    user = User(
        email=email or f"test_{uuid4().hex[:8]}@example.com",
        password_hash=get_password_hash(TEST_PASSWORD),
        is_active=True
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session):
    return await create_user(db_session)


@pytest_asyncio.fixture
async def other_user(db_session):
    return await create_user(db_session)


@pytest.fixture
def auth_headers(auth_service, test_user):
    """Bearer header for a fresh session of test_user"""
    session = auth_service.issue_session(test_user)
    return {"Authorization": f"Bearer {session.access_token}"}


@pytest.fixture
def event_service(db_session, test_user):
    return EventService(db_session, test_user)


@pytest.fixture
def anonymous_service(db_session):
    return EventService(db_session, None)


@pytest.fixture
def sample_event_data():
    return {
        "name": "Summer Classic",
        "sport_type": "Basketball",
        "date_time": "2025-07-01T18:00:00Z",
        "description": "Outdoor 3v3 tournament",
        "venues": [{"name": "Court A", "address": "12 Park Lane"}]
    }


async def add_event(
    db_session,
    owner: User,
    name: str,
    sport_type: SportType = SportType.BASKETBALL,
    days_offset: int = 7,
    venues=("Main Hall",)
) -> Event:
    """Insert an event directly, bypassing the service"""
    event = Event(
        user_id=owner.id,
        name=name,
        sport_type=sport_type,
        date_time=datetime.now(timezone.utc) + timedelta(days=days_offset),
    )
    db_session.add(event)
    await db_session.flush()
    for venue_name in venues:
        db_session.add(Venue(event_id=event.id, name=venue_name))
    await db_session.commit()
    return event


@pytest.fixture
def make_event(db_session):
    """Factory fixture for events inserted directly into the database"""
    async def _make(owner: User, name: str, **kwargs) -> Event:
        return await add_event(db_session, owner, name, **kwargs)

    return _make
