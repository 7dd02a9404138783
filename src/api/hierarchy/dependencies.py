"""Wiring for the tenant hierarchy context.

Builds TenantService and the outbox worker from settings and the shared
database infrastructure. Components can be swapped by calling
create_tenant_service directly (e.g., with an InMemoryTenantStore).
"""

from __future__ import annotations

from functools import partial

from hierarchy.application.observability import (
    DefaultHierarchyProbe,
    DefaultTenantServiceProbe,
    HierarchyProbe,
    TenantServiceProbe,
)
from hierarchy.application.services import TenantService
from hierarchy.domain.value_objects import TenantId
from hierarchy.infrastructure.outbox import TenantChangeTranslator
from hierarchy.infrastructure.unit_of_work import SQLAlchemyTenantUnitOfWork
from hierarchy.ports.unit_of_work import TenantUnitOfWorkFactory
from infrastructure.database.dependencies import get_session_factory
from infrastructure.outbox import OutboxWorker
from infrastructure.settings import (
    EventsSettings,
    HierarchySettings,
    get_events_settings,
    get_hierarchy_settings,
)
from shared_kernel.outbox import ChangeMessageTransport, ChangePublisher
from shared_kernel.outbox.observability import (
    DefaultOutboxWorkerProbe,
    OutboxWorkerProbe,
)


def get_tenant_service_probe() -> TenantServiceProbe:
    """Get TenantServiceProbe instance."""
    return DefaultTenantServiceProbe()


def get_hierarchy_probe() -> HierarchyProbe:
    """Get HierarchyProbe instance."""
    return DefaultHierarchyProbe()


def create_tenant_service(
    uow_factory: TenantUnitOfWorkFactory,
    publisher: ChangePublisher | None = None,
    hierarchy_settings: HierarchySettings | None = None,
    events_settings: EventsSettings | None = None,
    probe: TenantServiceProbe | None = None,
) -> TenantService:
    """Assemble a TenantService around the given store and publisher.

    Args:
        uow_factory: Creates units of work over the tenant store
        publisher: Receives change messages after commit; only needed when
            the units of work have no outbox
        hierarchy_settings: Id prefix and name limits (default: from env)
        events_settings: Message source name (default: from env)
        probe: Optional service probe
    """
    hierarchy_settings = hierarchy_settings or get_hierarchy_settings()
    events_settings = events_settings or get_events_settings()

    return TenantService(
        uow_factory=uow_factory,
        publisher=publisher,
        translator=TenantChangeTranslator(source=events_settings.source),
        id_generator=partial(
            TenantId.generate, prefix=hierarchy_settings.tenant_id_prefix
        ),
        probe=probe or get_tenant_service_probe(),
        hierarchy_probe=get_hierarchy_probe(),
        max_name_length=hierarchy_settings.max_name_length,
    )


def get_tenant_service() -> TenantService:
    """Get a TenantService backed by PostgreSQL.

    Change messages are written to the outbox in the mutation's own
    transaction; the outbox worker delivers them.
    """
    return create_tenant_service(
        uow_factory=partial(SQLAlchemyTenantUnitOfWork, get_session_factory()),
    )


def get_outbox_worker(
    transport: ChangeMessageTransport,
    probe: OutboxWorkerProbe | None = None,
) -> OutboxWorker:
    """Get an OutboxWorker delivering through transport.

    Args:
        transport: Message bus client
        probe: Optional worker probe
    """
    settings = get_events_settings()
    return OutboxWorker(
        session_factory=get_session_factory(),
        transport=transport,
        probe=probe or DefaultOutboxWorkerProbe(),
        subject_prefix=settings.subject_prefix,
        poll_interval_seconds=settings.outbox_poll_interval_seconds,
        batch_size=settings.outbox_batch_size,
        max_retries=settings.outbox_max_retries,
    )
