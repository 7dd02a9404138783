"""PostgreSQL implementation of ITenantRepository.

The repository is bound to the session of one unit of work. Unique and
foreign key constraints on the tenants table backstop the hierarchy
validator; violations are translated into hierarchy errors here.
"""

from __future__ import annotations

from typing import Collection, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hierarchy.domain.aggregates import Tenant
from hierarchy.domain.exceptions import (
    DuplicateSiblingNameError,
    ParentTenantNotFoundError,
    TenantConflictError,
    TenantHierarchyError,
    TenantNotFoundError,
)
from hierarchy.domain.value_objects import TenantId
from hierarchy.infrastructure.models import (
    PARENT_FOREIGN_KEY,
    PRIMARY_KEY_CONSTRAINT,
    SIBLING_NAME_CONSTRAINT,
    TenantModel,
)
from hierarchy.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from hierarchy.ports.repositories import ITenantRepository


class TenantRepository(ITenantRepository):
    """Repository managing PostgreSQL storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession owned by the enclosing unit of work
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def get_by_id(
        self, tenant_id: TenantId, *, for_update: bool = False
    ) -> Tenant | None:
        """Fetch a tenant row, optionally locking it.

        Args:
            tenant_id: The unique identifier of the tenant
            for_update: Take a row lock (SELECT ... FOR UPDATE)

        Returns:
            The Tenant aggregate, or None if not found
        """
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def get_child_by_name(
        self, parent_id: TenantId | None, name: str
    ) -> Tenant | None:
        """Fetch the sibling with the given name under parent_id."""
        if parent_id is None:
            parent_clause = TenantModel.parent_tenant_id.is_(None)
        else:
            parent_clause = TenantModel.parent_tenant_id == parent_id.value

        stmt = select(TenantModel).where(parent_clause, TenantModel.name == name)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def insert(self, tenant: Tenant) -> None:
        """Insert a new tenant row.

        Raises:
            TenantConflictError: If the id already exists
            ParentTenantNotFoundError: If the parent row does not exist
            DuplicateSiblingNameError: If a sibling already has the name
        """
        model = TenantModel(
            id=tenant.id.value,
            name=tenant.name,
            description=tenant.description,
            parent_tenant_id=tenant.parent_id.value if tenant.parent_id else None,
            created_at=tenant.created_at,
            updated_at=tenant.updated_at,
        )
        self._session.add(model)
        await self._flush(tenant)
        self._probe.tenant_saved(tenant.id.value)

    async def update(self, tenant: Tenant) -> None:
        """Write the tenant's name, description and updated_at.

        Raises:
            TenantNotFoundError: If the row does not exist
            DuplicateSiblingNameError: If a sibling already has the new name
        """
        stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            raise TenantNotFoundError(tenant.id.value)

        model.name = tenant.name
        model.description = tenant.description
        model.updated_at = tenant.updated_at
        await self._flush(tenant)
        self._probe.tenant_saved(tenant.id.value)

    async def delete_many(self, tenant_ids: Collection[TenantId]) -> int:
        """Delete all given rows in a single statement.

        The foreign key is checked at the end of the statement, so a
        subtree can be removed as long as the set is closed under
        descendants.

        Raises:
            TenantConflictError: If a row outside the set references one
                of the removed rows
        """
        if not tenant_ids:
            return 0

        stmt = delete(TenantModel).where(
            TenantModel.id.in_([tenant_id.value for tenant_id in tenant_ids])
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as e:
            first_id = next(iter(tenant_ids))
            self._probe.constraint_violated(PARENT_FOREIGN_KEY, first_id.value)
            raise TenantConflictError(
                "Tenants are still referenced by children outside the delete set"
            ) from e

        self._probe.tenants_removed(result.rowcount)
        return result.rowcount

    async def list_children(
        self, parent_id: TenantId, *, for_update: bool = False
    ) -> list[Tenant]:
        """Fetch the direct children of a tenant, ordered by (name, id)."""
        return await self.list_children_of([parent_id], for_update=for_update)

    async def list_children_of(
        self, parent_ids: Sequence[TenantId], *, for_update: bool = False
    ) -> list[Tenant]:
        """Fetch the direct children of several tenants, ordered by (name, id)."""
        if not parent_ids:
            return []

        stmt = (
            select(TenantModel)
            .where(TenantModel.parent_tenant_id.in_([p.value for p in parent_ids]))
            .order_by(TenantModel.name, TenantModel.id)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_roots(self) -> list[Tenant]:
        """Fetch every root tenant, ordered by (name, id)."""
        stmt = (
            select(TenantModel)
            .where(TenantModel.parent_tenant_id.is_(None))
            .order_by(TenantModel.name, TenantModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def _flush(self, tenant: Tenant) -> None:
        """Flush pending writes, translating constraint violations."""
        try:
            await self._session.flush()
        except IntegrityError as e:
            error = translate_integrity_error(e, tenant)
            if error is None:
                raise
            self._probe.constraint_violated(type(error).__name__, tenant.id.value)
            raise error from e

    def _to_domain(self, model: TenantModel) -> Tenant:
        """Reconstitute a Tenant aggregate from a row."""
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            description=model.description,
            parent_id=(
                TenantId(value=model.parent_tenant_id)
                if model.parent_tenant_id
                else None
            ),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


def violated_constraint(error: IntegrityError) -> str | None:
    """Name of the constraint the driver reported, if any.

    asyncpg errors carry ``constraint_name``; SQLAlchemy's asyncpg adapter
    wraps them, so the original is found as the adapter error's cause.
    """
    orig = error.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    return None


def translate_integrity_error(
    error: IntegrityError, tenant: Tenant
) -> TenantHierarchyError | None:
    """Map a constraint violation on the tenants table to a hierarchy error.

    Returns:
        The matching hierarchy error, or None for an unknown constraint
    """
    constraint = violated_constraint(error)
    parent_value = tenant.parent_id.value if tenant.parent_id else None

    if constraint == SIBLING_NAME_CONSTRAINT:
        return DuplicateSiblingNameError(tenant.name, parent_value)
    if constraint == PARENT_FOREIGN_KEY and parent_value is not None:
        return ParentTenantNotFoundError(parent_value)
    if constraint == PRIMARY_KEY_CONSTRAINT:
        return TenantConflictError(f"Tenant {tenant.id} already exists")
    return None
