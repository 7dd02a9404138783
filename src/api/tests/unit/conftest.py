"""Unit test fixtures with mocked dependencies."""

import pytest

from hierarchy.application.services import TenantService
from hierarchy.domain.value_objects import TenantId
from hierarchy.infrastructure.in_memory import InMemoryTenantStore
from hierarchy.infrastructure.outbox import TenantChangeTranslator
from shared_kernel.outbox.value_objects import ChangeMessage


class RecordingPublisher:
    """ChangePublisher that keeps every published message in memory."""

    def __init__(self) -> None:
        self.published: list[tuple[str, ChangeMessage]] = []

    async def publish(self, aggregate_type: str, message: ChangeMessage) -> None:
        self.published.append((aggregate_type, message))

    @property
    def messages(self) -> list[ChangeMessage]:
        return [message for _, message in self.published]

    def clear(self) -> None:
        self.published.clear()


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def tenant_store() -> InMemoryTenantStore:
    """Provide an empty in-memory tenant store."""
    return InMemoryTenantStore()


@pytest.fixture
def publisher() -> RecordingPublisher:
    """Provide a publisher that records messages."""
    return RecordingPublisher()


@pytest.fixture
def service(tenant_store, publisher) -> TenantService:
    """Provide a TenantService over the in-memory store."""
    return TenantService(
        uow_factory=tenant_store.unit_of_work,
        publisher=publisher,
        translator=TenantChangeTranslator(source="tenant-api"),
        id_generator=TenantId.generate,
    )
