from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from leave_workflow.db import get_session
from leave_workflow.main import app
from leave_workflow.models import SQLModel
from leave_workflow.services.attachments import InMemoryAttachmentStore, set_attachment_store
from leave_workflow.services.staff import InMemoryStaffDirectory, set_staff_directory

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create an async engine with the schema in place.

    Defaults to an in-memory SQLite database shared through a single
    connection; set TEST_DATABASE_URL to run against another database.
    """
    kwargs: dict[str, Any] = {}
    if TEST_DATABASE_URL.startswith("sqlite"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    _engine = create_async_engine(TEST_DATABASE_URL, **kwargs)
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session wrapped in a transaction that rolls back after each test."""
    async with engine.connect() as conn:
        txn = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)
        yield session
        await session.close()
        await txn.rollback()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def staff_directory() -> Iterator[InMemoryStaffDirectory]:
    """Install an empty in-memory staff directory for the test."""
    directory = InMemoryStaffDirectory()
    set_staff_directory(directory)
    yield directory
    set_staff_directory(InMemoryStaffDirectory())


@pytest.fixture
def attachment_store() -> Iterator[InMemoryAttachmentStore]:
    """Install an in-memory attachment store that records discards."""
    store = InMemoryAttachmentStore()
    set_attachment_store(store)
    yield store
    set_attachment_store(InMemoryAttachmentStore())
