"""
Notely Backend: Test Configuration (conftest.py)
================================================

Fixtures:
    ├── sample_user: transient User with a known API key
    ├── fake_resolver: in-memory IdentityResolver (no database)
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── no_db_client: HTTP client for an app without a database
    └── db_client: HTTP client for an app on a temporary SQLite database
"""

import os
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep a developer's DATABASE_URL out of the module-level app in notely.main
os.environ.pop("DATABASE_URL", None)
os.environ["LOG_LEVEL"] = "WARNING"

from notely.config import Settings  # noqa: E402
from notely.database import Base  # noqa: E402
from notely.main import create_app  # noqa: E402
from notely.models import User  # noqa: E402


class FakeResolver:
    """
    In-memory identity store.

    ``error`` makes every lookup raise it; ``calls`` records looked-up keys.
    """

    def __init__(self, users: Optional[Dict[str, User]] = None, error: Optional[Exception] = None):
        self.users = users or {}
        self.error = error
        self.calls = []

    async def resolve(self, api_key: str) -> Optional[User]:
        self.calls.append(api_key)
        if self.error is not None:
            raise self.error
        return self.users.get(api_key)


@pytest.fixture
def sample_user() -> User:
    now = datetime.now(timezone.utc)
    return User(
        id=uuid.uuid4(),
        name="alice",
        api_key="my-secret-key",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def resolver_factory():
    return FakeResolver


@pytest.fixture
def fake_resolver(sample_user) -> FakeResolver:
    return FakeResolver({sample_user.api_key: sample_user})


@pytest.fixture
def mock_db_session():
    """AsyncMock simulating AsyncSession (execute, flush, commit, rollback, close, add)."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def no_db_client():
    app = create_app(Settings(_env_file=None, database_url=None))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def db_app(tmp_path):
    """App on a fresh SQLite file with all tables created."""
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notely_test.db'}",
    )
    app = create_app(settings)
    engine = app.state.api.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield app
    await engine.dispose()


@pytest_asyncio.fixture
async def db_client(db_app):
    transport = ASGITransport(app=db_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
