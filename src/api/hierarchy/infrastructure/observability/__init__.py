"""Domain-Oriented Observability for hierarchy infrastructure."""

from hierarchy.infrastructure.observability.repository_probe import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)

__all__ = ["DefaultTenantRepositoryProbe", "TenantRepositoryProbe"]
