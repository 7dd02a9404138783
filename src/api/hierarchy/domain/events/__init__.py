"""Domain events for the tenant hierarchy context.

Domain events capture facts about things that have happened in the domain.
They are translated into change messages once the transaction that
produced them has committed.
"""

from hierarchy.domain.events.tenant import (
    TenantCreated,
    TenantDeleted,
    TenantUpdated,
)

# Type alias for all domain events in the hierarchy context
DomainEvent = TenantCreated | TenantUpdated | TenantDeleted

__all__ = [
    "DomainEvent",
    "TenantCreated",
    "TenantDeleted",
    "TenantUpdated",
]
