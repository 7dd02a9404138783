"""Application services for the tenant hierarchy context."""

from hierarchy.application.services.cascade_resolver import CascadeResolver
from hierarchy.application.services.hierarchy_validator import HierarchyValidator
from hierarchy.application.services.tenant_service import TenantService

__all__ = ["CascadeResolver", "HierarchyValidator", "TenantService"]
