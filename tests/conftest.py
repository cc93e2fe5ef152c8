"""
AboApp Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for pure-mock service tests
    ├── db_session: real AsyncSession on a fresh in-memory SQLite database
    ├── user / other_user: UserContext of the signed-in user (and a stranger)
    ├── make_subscription: factory for unsaved Subscription rows
    └── test_client: HTTPX AsyncClient bound to the app, with the database
        and the signed-in user overridden
"""

import os

# Must run before any aboapp import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["APP_TIMEZONE"] = "Europe/Berlin"
os.environ["REMINDER_DAYS_AHEAD"] = "3"
os.environ["FROM_EMAIL"] = "reminder@example.com"

from datetime import date
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from aboapp.database import Base
from aboapp.models.subscription import Subscription
from aboapp.schemas.auth import UserContext


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_session():
    """
    Real session on a private in-memory SQLite database.

    StaticPool keeps the single connection alive, so the schema created
    here is the one the session sees.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def user():
    return UserContext(user_id=uuid4(), email="anna@example.com", access_token="token-anna")


@pytest.fixture
def other_user():
    return UserContext(user_id=uuid4(), email="ben@example.com", access_token="token-ben")


@pytest.fixture
def make_subscription():
    """
    Factory for Subscription rows with sensible defaults.

    Column defaults only apply on flush, so every field the domain code
    reads is set explicitly here.
    """

    def _make(**overrides) -> Subscription:
        fields = {
            "id": uuid4(),
            "user_id": uuid4(),
            "name": "Netflix",
            "provider": "Netflix",
            "icon_key": "netflix",
            "price_cents": 999,
            "currency": "EUR",
            "cycle": "monthly",
            "custom_days": None,
            "start_date": None,
            "next_renewal_date": date(2025, 6, 15),
            "status": "active",
            "is_trial": False,
            "notes": None,
        }
        fields.update(overrides)
        return Subscription(**fields)

    return _make


@pytest_asyncio.fixture
async def test_client(db_session, user):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    get_db_session and get_current_user are overridden: requests run
    against the test database as `user`, no bearer token needed. Tests
    that exercise the real bearer handling clear the user override.
    """
    from aboapp.database import get_db_session
    from aboapp.main import app
    from aboapp.routes.deps import get_current_user

    async def _db():
        yield db_session

    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_current_user] = lambda: user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
