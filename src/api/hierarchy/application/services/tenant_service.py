"""Tenant application service for the hierarchy context.

Orchestrates every tenant mutation: validate against the current tree,
apply inside one unit of work, record one change message per affected
tenant, commit. Messages are stored in the unit of work's outbox when it
has one, otherwise handed to a publisher after commit. Reads go through
the same unit of work abstraction.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional, Sequence

from hierarchy.application.observability import (
    DefaultHierarchyProbe,
    DefaultTenantServiceProbe,
    HierarchyProbe,
    TenantServiceProbe,
)
from hierarchy.application.services.cascade_resolver import CascadeResolver
from hierarchy.application.services.hierarchy_validator import HierarchyValidator
from hierarchy.domain.aggregates import MAX_TENANT_NAME_LENGTH, Tenant
from hierarchy.domain.events import DomainEvent
from hierarchy.domain.exceptions import (
    PartialFailureInvariantViolation,
    StoreUnavailableError,
    TenantHierarchyError,
    TenantNotFoundError,
)
from hierarchy.domain.value_objects import TenantId, TenantPatch
from hierarchy.ports.notifications import (
    TENANT_AGGREGATE_TYPE,
    ITenantChangeTranslator,
)
from hierarchy.ports.unit_of_work import ITenantUnitOfWork, TenantUnitOfWorkFactory
from shared_kernel.outbox.ports import ChangePublisher
from shared_kernel.outbox.value_objects import ChangeMessage


class TenantService:
    """Application service for the tenant hierarchy.

    Each mutation moves through the same stages: validated against the
    tree, applied in a unit of work, its change messages recorded, then
    committed. With a transactional outbox the messages commit together
    with the change, so a failure anywhere leaves neither behind. Without
    one they go to the publisher after commit; a publish failure never
    undoes the committed change and is reported through the probe.
    """

    def __init__(
        self,
        uow_factory: TenantUnitOfWorkFactory,
        publisher: Optional[ChangePublisher],
        translator: ITenantChangeTranslator,
        id_generator: Optional[Callable[[], TenantId]] = None,
        probe: Optional[TenantServiceProbe] = None,
        hierarchy_probe: Optional[HierarchyProbe] = None,
        max_name_length: int = MAX_TENANT_NAME_LENGTH,
    ):
        """Initialize TenantService with dependencies.

        Args:
            uow_factory: Creates a fresh unit of work per operation
            publisher: Receives change messages after commit when the unit
                of work has no outbox
            translator: Builds change messages from domain events
            id_generator: Produces ids for new tenants
            probe: Optional domain probe for observability
            hierarchy_probe: Optional probe for validation and traversal
            max_name_length: Longest accepted tenant name
        """
        self._uow_factory = uow_factory
        self._publisher = publisher
        self._translator = translator
        self._id_generator = id_generator or TenantId.generate
        self._probe = probe or DefaultTenantServiceProbe()
        self._hierarchy_probe = hierarchy_probe or DefaultHierarchyProbe()
        self._max_name_length = max_name_length

    async def create_tenant(
        self,
        name: str,
        description: Optional[str] = None,
        parent_id: Optional[TenantId] = None,
        actor_id: Optional[str] = None,
    ) -> Tenant:
        """Create a tenant, as a root or as the child of parent_id.

        The change message lists every ancestor of the new tenant, root
        first, so caches derived from any of them can be invalidated.

        Returns:
            The created Tenant aggregate

        Raises:
            TenantValidationError: If the name is invalid
            ParentTenantNotFoundError: If the parent does not exist
            DuplicateSiblingNameError: If a sibling already has the name
            StoreUnavailableError: If the store failed; nothing was created
        """
        async with self._mutation("create") as uow:
            validator = self._validator(uow)
            await validator.validate_create(name, parent_id)

            tenant_id = self._id_generator()
            await validator.validate_no_cycle(tenant_id, parent_id)
            ancestor_ids = await self._resolver(uow).closure_for_create(parent_id)

            tenant = Tenant.create(
                tenant_id=tenant_id,
                name=name,
                description=description,
                parent_id=parent_id,
                ancestor_ids=ancestor_ids,
                actor_id=actor_id,
            )
            await uow.tenants.insert(tenant)
            pending = await self._record_changes(uow, tenant.collect_events())
            await uow.commit()

        self._probe.tenant_created(
            tenant_id=tenant.id.value,
            name=tenant.name,
            parent_id=parent_id.value if parent_id else None,
        )
        await self._publish(pending)
        return tenant

    async def get_tenant(self, tenant_id: TenantId) -> Tenant:
        """Retrieve a tenant by id.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        async with self._uow_factory() as uow:
            tenant = await uow.tenants.get_by_id(tenant_id)

        if tenant is None:
            self._probe.tenant_not_found(tenant_id.value)
            raise TenantNotFoundError(tenant_id.value)

        self._probe.tenant_retrieved(tenant_id.value)
        return tenant

    async def update_tenant(
        self,
        tenant_id: TenantId,
        name: Optional[str] = None,
        description: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Tenant:
        """Change a tenant's name and/or description.

        The parent never changes, so only the tenant itself is notified.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            TenantValidationError: If nothing is set or the name is invalid
            DuplicateSiblingNameError: If a sibling already has the new name
            StoreUnavailableError: If the store failed; nothing was changed
        """
        patch = TenantPatch(name=name, description=description)

        async with self._mutation("update") as uow:
            tenant = await uow.tenants.get_by_id(tenant_id, for_update=True)
            if tenant is None:
                raise TenantNotFoundError(tenant_id.value)

            if patch.name is not None:
                await self._validator(uow).validate_rename(tenant, patch.name)

            tenant.apply_patch(patch, actor_id=actor_id)
            await uow.tenants.update(tenant)
            pending = await self._record_changes(uow, tenant.collect_events())
            await uow.commit()

        self._probe.tenant_updated(tenant_id.value, patch.changed_fields())
        await self._publish(pending)
        return tenant

    async def delete_tenant(
        self, tenant_id: TenantId, actor_id: Optional[str] = None
    ) -> list[TenantId]:
        """Delete a tenant together with its entire subtree.

        Either every tenant in the subtree is removed or none is. One
        change message is recorded per removed tenant, the requested
        tenant first.

        Returns:
            Ids of the removed tenants, the requested tenant first

        Raises:
            TenantNotFoundError: If the tenant does not exist
            StoreUnavailableError: If the store failed; nothing was removed
        """
        async with self._mutation("delete") as uow:
            closure = await self._resolver(uow).closure_for_delete(tenant_id)
            for tenant in closure:
                tenant.mark_for_deletion(actor_id=actor_id)

            removed_ids = [tenant.id for tenant in closure]
            removed = await uow.tenants.delete_many(removed_ids)
            if removed != len(closure):
                raise PartialFailureInvariantViolation(
                    f"Delete of {tenant_id} removed {removed} of "
                    f"{len(closure)} tenants"
                )
            pending = await self._record_changes(
                uow, [event for tenant in closure for event in tenant.collect_events()]
            )
            await uow.commit()

        self._probe.tenants_deleted(tenant_id.value, len(closure))
        await self._publish(pending)
        return removed_ids

    async def list_children(self, tenant_id: Optional[TenantId] = None) -> list[Tenant]:
        """List the direct children of a tenant, or the roots when tenant_id is None.

        Raises:
            TenantNotFoundError: If tenant_id is given and does not exist
        """
        async with self._uow_factory() as uow:
            if tenant_id is None:
                children = await uow.tenants.list_roots()
            else:
                if await uow.tenants.get_by_id(tenant_id) is None:
                    self._probe.tenant_not_found(tenant_id.value)
                    raise TenantNotFoundError(tenant_id.value)
                children = await uow.tenants.list_children(tenant_id)

        self._probe.tenants_listed("children", len(children))
        return children

    async def list_descendants(self, tenant_id: TenantId) -> list[Tenant]:
        """List every descendant of a tenant, breadth-first.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        async with self._uow_factory() as uow:
            descendants = await self._resolver(uow).descendants_of(tenant_id)

        self._probe.tenants_listed("descendants", len(descendants))
        return descendants

    async def list_ancestors(
        self, tenant_id: TenantId, until: Optional[TenantId] = None
    ) -> list[Tenant]:
        """List the ancestors of a tenant, nearest first.

        Args:
            tenant_id: The tenant to start from (not included)
            until: Stop before this ancestor. An id that is not an ancestor
                is ignored and the full chain is returned.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        async with self._uow_factory() as uow:
            ancestors = await self._resolver(uow).ancestors_of(tenant_id, until=until)

        self._probe.tenants_listed("ancestors", len(ancestors))
        return ancestors

    @asynccontextmanager
    async def _mutation(self, operation: str) -> AsyncIterator[ITenantUnitOfWork]:
        """Run a mutation in a fresh unit of work, reporting failures."""
        try:
            async with self._uow_factory() as uow:
                yield uow
        except (StoreUnavailableError, PartialFailureInvariantViolation) as e:
            self._probe.mutation_rolled_back(operation, str(e))
            raise
        except TenantHierarchyError as e:
            self._probe.mutation_rejected(operation, str(e))
            raise

    def _validator(self, uow: ITenantUnitOfWork) -> HierarchyValidator:
        return HierarchyValidator(
            uow.tenants,
            probe=self._hierarchy_probe,
            max_name_length=self._max_name_length,
        )

    def _resolver(self, uow: ITenantUnitOfWork) -> CascadeResolver:
        return CascadeResolver(uow.tenants, probe=self._hierarchy_probe)

    async def _record_changes(
        self, uow: ITenantUnitOfWork, events: Sequence[DomainEvent]
    ) -> list[ChangeMessage]:
        """Translate events and append them to the unit of work's outbox.

        Returns:
            The messages still to be published after commit; empty when
            the outbox took them
        """
        messages = [self._translator.translate(event) for event in events]
        outbox = uow.outbox
        if outbox is None:
            return messages

        for message in messages:
            await outbox.append(TENANT_AGGREGATE_TYPE, message)
        self._probe.notifications_recorded(len(messages))
        return []

    async def _publish(self, messages: Sequence[ChangeMessage]) -> None:
        """Hand each message to the publisher.

        The change is already committed; a publish failure is reported and
        the remaining messages are still attempted.
        """
        if self._publisher is None:
            for message in messages:
                self._probe.notification_publish_failed(
                    message.subject_id,
                    message.event_type.value,
                    "no change publisher configured",
                )
            return

        for message in messages:
            try:
                await self._publisher.publish(TENANT_AGGREGATE_TYPE, message)
            except Exception as e:
                self._probe.notification_publish_failed(
                    message.subject_id, message.event_type.value, str(e)
                )
                continue
            self._probe.notification_published(
                message.subject_id, message.event_type.value
            )
