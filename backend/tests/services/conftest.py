"""Service test fixtures — async DB, seeded accounts and FastAPI test clients.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys on
    - get_db dependency overridden to use the test DB
    - db_manager patched for code paths that bypass get_db (readiness probe)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific behaviour is covered by the migration, not here)
    - Accounts created through AdminRepository so hashes are real bcrypt (cost 4)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from travelcrm.db.base import Base
from travelcrm.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
import travelcrm.infrastructure.database as db_module
from travelcrm.main import app

from account_factory import create_account, login

BASE_URL = "http://test"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url=BASE_URL,
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def second_client(client):
    """Independent cookie jar against the same app and database."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url=BASE_URL,
    ) as c:
        yield c


@pytest.fixture
async def admin_account(test_db):
    return await create_account(
        test_db, "admin", "admin123", role="admin",
        full_name="System Administrator",
    )


@pytest.fixture
async def user_account(test_db):
    return await create_account(test_db, "agent", "agent123", role="user")


@pytest.fixture
async def admin_client(client, admin_account):
    """client logged in as role=admin."""
    res = await login(client, "admin", "admin123")
    assert res.status_code == 200
    return client


@pytest.fixture
async def user_client(second_client, user_account):
    """second_client logged in as role=user."""
    res = await login(second_client, "agent", "agent123")
    assert res.status_code == 200
    return second_client
