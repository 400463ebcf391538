import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Optional overrides for local test runs
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402
from libs.db.config import build_engine  # noqa: E402
from libs.db.session import get_async_db  # noqa: E402
from services.delivery_service import models as _delivery_models  # noqa: F401,E402
from services.delivery_service.app.main import create_app  # noqa: E402
from services.delivery_service.realtime import RealtimeNotifier  # noqa: E402

# Clear cached settings to reload with new env vars
get_settings.cache_clear()

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps a single connection so every session sees the same
    database.
    """
    engine = build_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def notifier() -> AsyncGenerator[RealtimeNotifier, None]:
    notifier = RealtimeNotifier(queue_size=16)
    yield notifier
    await notifier.close()


@pytest_asyncio.fixture
async def client(session_factory, notifier) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient bound to a fresh app.

    Each request gets its own session on the test database and the app
    publishes through the ``notifier`` fixture.
    """
    app = create_app()
    app.state.notifier = notifier

    async def _test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = _test_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
