import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, AsyncGenerator, Generator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Must be set before the application modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from skillswap.database import Base, get_db  # noqa: E402
from skillswap.main import app  # noqa: E402
from skillswap.models.db.swap_request_model import SwapRequestModel  # noqa: E402
from skillswap.models.db.user_model import UserModel  # noqa: E402


class FakeClock:
    """Deterministic clock, advancing by ``step`` on every call."""

    def __init__(
        self,
        start: datetime = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1),
    ):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema, one per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_db(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Database session for integration tests."""
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def people(test_db: AsyncSession) -> SimpleNamespace:
    """Three users and one swap request between Alice and Bob."""
    alice = UserModel(id=uuid4(), name="Alice", avatar="alice.png", role="user")
    bob = UserModel(id=uuid4(), name="Bob", avatar="bob.png", role="user")
    carol = UserModel(id=uuid4(), name="Carol", avatar=None, role="admin")
    swap = SwapRequestModel(
        id=uuid4(), skill_offered="Guitar", skill_wanted="Spanish", status="pending"
    )
    test_db.add_all([alice, bob, carol, swap])
    await test_db.commit()
    return SimpleNamespace(alice=alice.id, bob=bob.id, carol=carol.id, swap=swap.id)


@pytest.fixture(scope="function")
async def mock_db() -> AsyncGenerator[AsyncMock, None]:
    """Create a mock database session for unit tests."""
    mock_session = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.close = AsyncMock()
    mock_session.refresh = AsyncMock()
    mock_session.execute = AsyncMock()
    mock_session.add = MagicMock()  # add is sync, not async

    yield mock_session


@pytest.fixture
def client() -> Generator[TestClient, Any, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api_client() -> Generator[TestClient, Any, None]:
    """Test client whose routes never touch a database."""
    app.dependency_overrides[get_db] = lambda: MagicMock()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
