"""Domain-Oriented Observability for the hierarchy application layer.

Probes for application service operations following Domain-Oriented
Observability patterns.
"""

from hierarchy.application.observability.hierarchy_probe import (
    DefaultHierarchyProbe,
    HierarchyProbe,
)
from hierarchy.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "HierarchyProbe",
    "DefaultHierarchyProbe",
    "TenantServiceProbe",
    "DefaultTenantServiceProbe",
]
