"""Aggregates for the tenant hierarchy context."""

from hierarchy.domain.aggregates.tenant import (
    MAX_TENANT_NAME_LENGTH,
    Tenant,
    validate_tenant_name,
)

__all__ = ["MAX_TENANT_NAME_LENGTH", "Tenant", "validate_tenant_name"]
