"""Root conftest — shared test configuration and SQLite-backed fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The notifier fixture is stopped after each test (no worker task leaks)

Design Decisions:
    - SQLite in-memory with StaticPool: every session sees the same database
"""

import os

# Ensure tests never reach a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import board_categories.models  # noqa: E402,F401
from board_categories.db.base import Base  # noqa: E402
from board_categories.infrastructure.category_store import SqlCategoryStore  # noqa: E402
from board_categories.infrastructure.database import DatabaseSessionManager  # noqa: E402
from board_categories.services.notifier import ChangeNotifier  # noqa: E402

from tests.fakes import InMemoryCategoryStore, RecordingBroadcaster  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def sql_store(test_db_manager):
    return SqlCategoryStore(test_db_manager)


@pytest.fixture
def memory_store():
    return InMemoryCategoryStore()


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
async def notifier(broadcaster):
    n = ChangeNotifier(broadcaster, max_pending=100)
    yield n
    await n.stop()
