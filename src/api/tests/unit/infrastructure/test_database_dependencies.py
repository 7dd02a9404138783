"""Unit tests for the process-wide engine and session factory."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_engine,
    get_session_factory,
)


@pytest_asyncio.fixture(autouse=True)
async def reset_engine():
    """Dispose the shared engine after each test."""
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_get_engine():
    """Test that get_engine returns an asyncpg AsyncEngine."""
    engine = get_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_engine_is_singleton():
    """Test that the engine is cached and reused."""
    assert get_engine() is get_engine()


@pytest.mark.asyncio
async def test_session_factory_bound_to_engine():
    """Sessions created by the factory use the shared engine."""
    engine = get_engine()
    factory = get_session_factory()

    session = factory()
    try:
        assert isinstance(session, AsyncSession)
        assert session.bind.sync_engine is engine.sync_engine
    finally:
        await session.close()


@pytest.mark.asyncio
async def test_session_factory_does_not_expire_on_commit():
    """Aggregates stay readable after a unit of work commits."""
    factory = get_session_factory()

    assert factory.kw["expire_on_commit"] is False


@pytest.mark.asyncio
async def test_close_database_connections():
    """Test that close_database_connections disposes the engine."""
    engine = get_engine()

    await close_database_connections()

    assert get_engine() is not engine
