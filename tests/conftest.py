"""
Pytest configuration and fixtures.
"""

import sys
from datetime import datetime
from pathlib import Path
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from clientdesk.i18n import set_language
from clientdesk.infra.db import Base

USER = "user-1"
OTHER_USER = "user-2"


@pytest.fixture(autouse=True)
def english():
    """Messages are asserted in English"""
    set_language('en')
    yield
    set_language('en')


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create a new session for a test"""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def now():
    """A fixed Wednesday afternoon"""
    return datetime(2026, 3, 18, 15, 30)
