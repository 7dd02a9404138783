"""Repository protocol (port) for the tenant forest.

The repository is the only component that touches persistent tenant state.
It is bound to one transaction, so every read it serves is consistent
with the writes made through it.
"""

from __future__ import annotations

from typing import Collection, Protocol, Sequence, runtime_checkable

from hierarchy.domain.aggregates import Tenant
from hierarchy.domain.value_objects import TenantId


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence.

    Listing methods return tenants ordered by (name, id) so results are
    stable across calls.
    """

    async def get_by_id(
        self, tenant_id: TenantId, *, for_update: bool = False
    ) -> Tenant | None:
        """Retrieve a tenant by its id.

        Args:
            tenant_id: The id to look up
            for_update: Lock the row until the transaction ends

        Returns:
            The Tenant aggregate, or None if not found
        """
        ...

    async def get_child_by_name(
        self, parent_id: TenantId | None, name: str
    ) -> Tenant | None:
        """Retrieve the child of a parent with the given name.

        Args:
            parent_id: The parent, or None to search among root tenants
            name: Exact (case-sensitive) name

        Returns:
            The matching Tenant aggregate, or None
        """
        ...

    async def insert(self, tenant: Tenant) -> None:
        """Persist a new tenant.

        Raises:
            TenantConflictError: If the id already exists
            ParentTenantNotFoundError: If the parent does not exist
            DuplicateSiblingNameError: If a sibling already has the name
        """
        ...

    async def update(self, tenant: Tenant) -> None:
        """Persist the mutable fields (name, description, updated_at).

        Raises:
            TenantNotFoundError: If the tenant does not exist
            DuplicateSiblingNameError: If a sibling already has the new name
        """
        ...

    async def delete_many(self, tenant_ids: Collection[TenantId]) -> int:
        """Remove a set of tenants in one operation.

        Args:
            tenant_ids: Ids to remove; must be closed under descendants

        Returns:
            Number of tenants removed

        Raises:
            TenantConflictError: If a remaining tenant still references one
                of the removed tenants
        """
        ...

    async def list_children(
        self, parent_id: TenantId, *, for_update: bool = False
    ) -> list[Tenant]:
        """List the direct children of a tenant."""
        ...

    async def list_children_of(
        self, parent_ids: Sequence[TenantId], *, for_update: bool = False
    ) -> list[Tenant]:
        """List the direct children of several tenants in one query.

        Used to expand a subtree one level at a time.
        """
        ...

    async def list_roots(self) -> list[Tenant]:
        """List all tenants without a parent."""
        ...
