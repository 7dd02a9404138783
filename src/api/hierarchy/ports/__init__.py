"""Ports for the tenant hierarchy context.

Protocols the application layer depends on; adapters in the
infrastructure layer implement them.
"""

from hierarchy.ports.notifications import (
    TENANT_AGGREGATE_TYPE,
    ITenantChangeTranslator,
)
from hierarchy.ports.repositories import ITenantRepository
from hierarchy.ports.unit_of_work import ITenantUnitOfWork, TenantUnitOfWorkFactory

__all__ = [
    "TENANT_AGGREGATE_TYPE",
    "ITenantChangeTranslator",
    "ITenantRepository",
    "ITenantUnitOfWork",
    "TenantUnitOfWorkFactory",
]
