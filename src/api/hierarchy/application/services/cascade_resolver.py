"""Ancestor and descendant resolution over the tenant forest.

Every traversal keeps a visited set. A corrupted store holding a cycle
produces HierarchyCycleError instead of an endless walk, and a row the
store returns twice is listed once.
"""

from __future__ import annotations

from typing import Optional

from hierarchy.application.observability import (
    DefaultHierarchyProbe,
    HierarchyProbe,
)
from hierarchy.domain.aggregates import Tenant
from hierarchy.domain.exceptions import (
    HierarchyCycleError,
    ParentTenantNotFoundError,
    TenantNotFoundError,
)
from hierarchy.domain.value_objects import TenantId
from hierarchy.ports.repositories import ITenantRepository


class CascadeResolver:
    """Resolves the set of tenants affected by a change.

    Ancestor walks go one parent lookup at a time; descendant walks expand
    the subtree one level per query.
    """

    def __init__(
        self,
        repository: ITenantRepository,
        probe: Optional[HierarchyProbe] = None,
    ):
        self._repository = repository
        self._probe = probe or DefaultHierarchyProbe()

    async def ancestors_of(
        self, tenant_id: TenantId, until: Optional[TenantId] = None
    ) -> list[Tenant]:
        """List the ancestors of a tenant, nearest first.

        Args:
            tenant_id: The tenant to start from (not included)
            until: Stop before this ancestor (exclusive). If it is not on
                the chain the walk continues to the root.

        Raises:
            TenantNotFoundError: If tenant_id does not exist
            HierarchyCycleError: If the chain revisits a tenant
        """
        start = await self._repository.get_by_id(tenant_id)
        if start is None:
            raise TenantNotFoundError(tenant_id.value)
        return await self._walk_up(start, until)

    async def descendants_of(
        self, tenant_id: TenantId, *, for_update: bool = False
    ) -> list[Tenant]:
        """List every descendant of a tenant in breadth-first order.

        Args:
            tenant_id: The subtree root (not included)
            for_update: Lock every visited row until the transaction ends

        Raises:
            TenantNotFoundError: If tenant_id does not exist
            HierarchyCycleError: If the subtree revisits a tenant
        """
        root = await self._repository.get_by_id(tenant_id, for_update=for_update)
        if root is None:
            raise TenantNotFoundError(tenant_id.value)
        return await self._walk_down(root, for_update=for_update)

    async def closure_for_delete(self, tenant_id: TenantId) -> list[Tenant]:
        """Resolve the tenants a delete of tenant_id must remove.

        The rows are locked for the rest of the transaction, so a child
        cannot be attached to any of them before the delete commits.

        Returns:
            The tenant itself followed by its descendants in breadth-first order

        Raises:
            TenantNotFoundError: If tenant_id does not exist
        """
        root = await self._repository.get_by_id(tenant_id, for_update=True)
        if root is None:
            raise TenantNotFoundError(tenant_id.value)

        closure = [root, *await self._walk_down(root, for_update=True)]
        self._probe.closure_resolved(tenant_id.value, len(closure))
        return closure

    async def closure_for_create(
        self, parent_id: Optional[TenantId]
    ) -> list[TenantId]:
        """Resolve the existing tenants a new child of parent_id affects.

        Returns:
            The parent's ancestors root first, ending with the parent;
            empty for a root tenant

        Raises:
            ParentTenantNotFoundError: If the parent does not exist
        """
        if parent_id is None:
            return []

        parent = await self._repository.get_by_id(parent_id)
        if parent is None:
            raise ParentTenantNotFoundError(parent_id.value)

        chain = [parent, *await self._walk_up(parent)]
        return [tenant.id for tenant in reversed(chain)]

    async def _walk_up(
        self, start: Tenant, until: Optional[TenantId] = None
    ) -> list[Tenant]:
        ancestors: list[Tenant] = []
        visited = {start.id}
        current = start

        while current.parent_id is not None:
            parent_id = current.parent_id
            if parent_id == until:
                return ancestors
            if parent_id in visited:
                self._probe.cycle_detected(start.id.value, parent_id.value)
                raise HierarchyCycleError(start.id.value, parent_id.value)

            parent = await self._repository.get_by_id(parent_id)
            if parent is None:
                self._probe.dangling_parent(current.id.value, parent_id.value)
                break

            visited.add(parent_id)
            ancestors.append(parent)
            current = parent

        if until is not None:
            self._probe.until_not_reached(start.id.value, until.value)
        return ancestors

    async def _walk_down(self, root: Tenant, *, for_update: bool) -> list[Tenant]:
        descendants: list[Tenant] = []
        visited = {root.id}
        frontier = [root.id]

        while frontier:
            children = await self._repository.list_children_of(
                frontier, for_update=for_update
            )
            frontier = []
            for child in children:
                if child.id == root.id:
                    self._probe.cycle_detected(root.id.value, child.id.value)
                    raise HierarchyCycleError(root.id.value, child.id.value)
                if child.id in visited:
                    self._probe.duplicate_row_skipped(root.id.value, child.id.value)
                    continue
                visited.add(child.id)
                descendants.append(child)
                frontier.append(child.id)

        return descendants
