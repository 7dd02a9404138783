"""Structural checks run before a tenant mutation is applied.

The validator reads through the same repository (and so the same
transaction) the mutation will write through, so a check and the write it
guards see the same state.
"""

from __future__ import annotations

from typing import Optional

from hierarchy.application.observability import (
    DefaultHierarchyProbe,
    HierarchyProbe,
)
from hierarchy.domain.aggregates import (
    MAX_TENANT_NAME_LENGTH,
    Tenant,
    validate_tenant_name,
)
from hierarchy.domain.exceptions import (
    DuplicateSiblingNameError,
    HierarchyCycleError,
    ParentTenantNotFoundError,
)
from hierarchy.domain.value_objects import TenantId
from hierarchy.ports.repositories import ITenantRepository


class HierarchyValidator:
    """Checks that a proposed change keeps the tenant forest well formed."""

    def __init__(
        self,
        repository: ITenantRepository,
        probe: Optional[HierarchyProbe] = None,
        max_name_length: int = MAX_TENANT_NAME_LENGTH,
    ):
        self._repository = repository
        self._probe = probe or DefaultHierarchyProbe()
        self._max_name_length = max_name_length

    def validate_name(self, name: str) -> None:
        """Check a tenant name against the configured limits.

        Raises:
            TenantValidationError: If the name is empty, blank or too long
        """
        validate_tenant_name(name, self._max_name_length)

    async def validate_create(
        self, name: str, parent_id: Optional[TenantId]
    ) -> Optional[Tenant]:
        """Check that a tenant with this name may be created under parent_id.

        Args:
            name: Proposed name
            parent_id: Proposed parent, or None for a root tenant

        Returns:
            The parent tenant, or None for a root tenant

        Raises:
            TenantValidationError: If the name is invalid
            ParentTenantNotFoundError: If the parent does not exist
            DuplicateSiblingNameError: If a sibling already has the name
        """
        self.validate_name(name)

        parent = None
        if parent_id is not None:
            parent = await self._repository.get_by_id(parent_id)
            if parent is None:
                self._probe.parent_not_found(parent_id.value)
                raise ParentTenantNotFoundError(parent_id.value)

        await self._ensure_name_free(name, parent_id)
        return parent

    async def validate_rename(self, tenant: Tenant, new_name: str) -> None:
        """Check that tenant may be renamed to new_name.

        Renaming a tenant to its current name is allowed.

        Raises:
            TenantValidationError: If the name is invalid
            DuplicateSiblingNameError: If another sibling already has the name
        """
        self.validate_name(new_name)
        if new_name == tenant.name:
            return
        await self._ensure_name_free(new_name, tenant.parent_id, exclude=tenant.id)

    async def validate_no_cycle(
        self, tenant_id: TenantId, candidate_parent_id: Optional[TenantId]
    ) -> None:
        """Check that tenant_id is not an ancestor of candidate_parent_id.

        Walks the candidate's ancestor chain. A revisited node means the
        stored tree already holds a cycle, which is reported the same way.

        Raises:
            ParentTenantNotFoundError: If the candidate parent does not exist
            HierarchyCycleError: If the link would close a cycle
        """
        if candidate_parent_id is None:
            return

        visited: set[TenantId] = set()
        current_id: Optional[TenantId] = candidate_parent_id
        while current_id is not None:
            if current_id == tenant_id or current_id in visited:
                self._probe.cycle_detected(tenant_id.value, current_id.value)
                raise HierarchyCycleError(tenant_id.value, candidate_parent_id.value)
            visited.add(current_id)

            current = await self._repository.get_by_id(current_id)
            if current is None:
                if current_id == candidate_parent_id:
                    self._probe.parent_not_found(current_id.value)
                    raise ParentTenantNotFoundError(current_id.value)
                # Dangling link; the chain ends here
                break
            current_id = current.parent_id

    async def _ensure_name_free(
        self,
        name: str,
        parent_id: Optional[TenantId],
        exclude: Optional[TenantId] = None,
    ) -> None:
        existing = await self._repository.get_child_by_name(parent_id, name)
        if existing is not None and existing.id != exclude:
            parent_value = parent_id.value if parent_id else None
            self._probe.duplicate_sibling_name(name, parent_value)
            raise DuplicateSiblingNameError(name, parent_value)
