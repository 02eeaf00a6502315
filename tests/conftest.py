import os
from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shoot_scheduler.api.routes import schedules as schedule_routes
from shoot_scheduler.db import models  # noqa: F401
from shoot_scheduler.db import session as db_session
from shoot_scheduler.db.base import Base
from shoot_scheduler.main import create_application


@pytest.fixture()
def database_url() -> str:
    return os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture()
async def async_engine(database_url: str) -> AsyncIterator[AsyncEngine]:
    """Provide a per-test async engine, resetting schema before each run."""
    engine = create_async_engine(database_url, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(async_engine: AsyncEngine) -> Iterator[async_sessionmaker[AsyncSession]]:
    factory = async_sessionmaker(async_engine, expire_on_commit=False, class_=AsyncSession)
    yield factory


@pytest_asyncio.fixture()
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as db:
        yield db


@pytest.fixture(autouse=True)
def _reset_project_locks() -> Iterator[None]:
    schedule_routes._project_locks.clear()
    schedule_routes._lock_users.clear()
    yield
    schedule_routes._project_locks.clear()
    schedule_routes._lock_users.clear()


@pytest_asyncio.fixture()
async def api_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    original_factory = db_session.async_session_factory
    db_session.async_session_factory = session_factory

    app = create_application()

    async def _get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as db:
            yield db

    app.dependency_overrides[db_session.get_db_session] = _get_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        db_session.async_session_factory = original_factory
