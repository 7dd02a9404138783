"""Tenant domain events for the hierarchy context.

Each event carries the ids of every other tenant whose derived state
depends on the change, so that a single change message is enough for a
consumer to invalidate its caches.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TenantCreated:
    """Event raised when a tenant is created.

    Attributes:
        tenant_id: The id of the created tenant
        name: The name of the tenant
        parent_tenant_id: The id of the parent (None for a root tenant)
        ancestor_ids: Every ancestor of the tenant, root first, ending
            with the parent (empty for a root tenant)
        actor_id: The actor who performed the change, if known
        occurred_at: When the event occurred (UTC)
    """

    tenant_id: str
    name: str
    parent_tenant_id: Optional[str]
    ancestor_ids: tuple[str, ...]
    actor_id: Optional[str]
    occurred_at: datetime


@dataclass(frozen=True)
class TenantUpdated:
    """Event raised when a tenant's name or description changes.

    Structure is unchanged by an update, so no other tenant is affected.

    Attributes:
        tenant_id: The id of the updated tenant
        name: The name after the update
        description: The description after the update
        changed_fields: Names of the fields the update set
        actor_id: The actor who performed the change, if known
        occurred_at: When the event occurred (UTC)
    """

    tenant_id: str
    name: str
    description: Optional[str]
    changed_fields: tuple[str, ...]
    actor_id: Optional[str]
    occurred_at: datetime


@dataclass(frozen=True)
class TenantDeleted:
    """Event raised for every tenant removed by a cascading delete.

    Attributes:
        tenant_id: The id of the removed tenant
        name: The name of the removed tenant
        parent_tenant_id: The id of its parent at deletion time
        actor_id: The actor who requested the delete, if known
        occurred_at: When the event occurred (UTC)
    """

    tenant_id: str
    name: str
    parent_tenant_id: Optional[str]
    actor_id: Optional[str]
    occurred_at: datetime
