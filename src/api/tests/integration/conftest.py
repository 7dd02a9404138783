"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL 15+ instance. Tests using them
are skipped when the database is unreachable.
"""

from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hierarchy.infrastructure.models import TenantModel  # noqa: F401
from infrastructure.database.engines import create_engine
from infrastructure.database.models import Base
from infrastructure.outbox.models import OutboxModel  # noqa: F401
from infrastructure.settings import DatabaseSettings


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        TENANTAPI_DB_HOST, TENANTAPI_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("TENANTAPI_DB_HOST", "localhost"),
        port=int(os.getenv("TENANTAPI_DB_PORT", "5432")),
        database=os.getenv("TENANTAPI_DB_DATABASE", "tenantapi"),
        username=os.getenv("TENANTAPI_DB_USERNAME", "tenantapi"),
        password=SecretStr(os.getenv("TENANTAPI_DB_PASSWORD", "tenantapi_dev_password")),
        pool_enabled=False,
    )


@pytest_asyncio.fixture
async def session_factory(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Provide a session factory over a clean schema.

    Creates the tables if needed and empties them before each test.
    """
    engine = create_engine(integration_db_settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            await conn.execute(text("TRUNCATE outbox, tenants"))
    except OSError as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL unavailable: {e}")

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    await engine.dispose()
