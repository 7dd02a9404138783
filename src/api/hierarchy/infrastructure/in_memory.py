"""In-memory implementation of the tenant store.

Keeps the forest in a dictionary and enforces the same constraints the
PostgreSQL schema does (unique sibling names, existing parents, no
dangling children after a delete). Units of work are serialized with an
asyncio lock and operate on a private copy of the rows that replaces the
shared rows only on commit.

Suitable for tests and single-process embedding; data is lost on restart.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Collection, Iterable, Sequence

from hierarchy.domain.aggregates import Tenant
from hierarchy.domain.exceptions import (
    DuplicateSiblingNameError,
    ParentTenantNotFoundError,
    TenantConflictError,
    TenantNotFoundError,
)
from hierarchy.domain.value_objects import TenantId
from shared_kernel.outbox.ports import IOutboxRepository


def _copy(tenant: Tenant) -> Tenant:
    return replace(tenant, _pending_events=[])


def _ordered(tenants: Iterable[Tenant]) -> list[Tenant]:
    return sorted((_copy(t) for t in tenants), key=lambda t: (t.name, t.id.value))


class InMemoryTenantRepository:
    """ITenantRepository over a dictionary of rows.

    Returned aggregates are copies; changes reach the rows only through
    insert and update.
    """

    def __init__(self, rows: dict[TenantId, Tenant]) -> None:
        self._rows = rows

    async def get_by_id(
        self, tenant_id: TenantId, *, for_update: bool = False
    ) -> Tenant | None:
        row = self._rows.get(tenant_id)
        return _copy(row) if row else None

    async def get_child_by_name(
        self, parent_id: TenantId | None, name: str
    ) -> Tenant | None:
        row = self._find_child(parent_id, name)
        return _copy(row) if row else None

    async def insert(self, tenant: Tenant) -> None:
        if tenant.id in self._rows:
            raise TenantConflictError(f"Tenant {tenant.id} already exists")
        if tenant.parent_id is not None and tenant.parent_id not in self._rows:
            raise ParentTenantNotFoundError(tenant.parent_id.value)
        self._ensure_name_free(tenant)
        self._rows[tenant.id] = _copy(tenant)

    async def update(self, tenant: Tenant) -> None:
        row = self._rows.get(tenant.id)
        if row is None:
            raise TenantNotFoundError(tenant.id.value)
        self._ensure_name_free(tenant)
        self._rows[tenant.id] = replace(
            row,
            name=tenant.name,
            description=tenant.description,
            updated_at=tenant.updated_at,
        )

    async def delete_many(self, tenant_ids: Collection[TenantId]) -> int:
        doomed = set(tenant_ids)
        for row in self._rows.values():
            if row.id not in doomed and row.parent_id in doomed:
                raise TenantConflictError(
                    f"Tenant {row.parent_id} is still referenced by {row.id}"
                )

        removed = 0
        for tenant_id in doomed:
            if self._rows.pop(tenant_id, None) is not None:
                removed += 1
        return removed

    async def list_children(
        self, parent_id: TenantId, *, for_update: bool = False
    ) -> list[Tenant]:
        return await self.list_children_of([parent_id], for_update=for_update)

    async def list_children_of(
        self, parent_ids: Sequence[TenantId], *, for_update: bool = False
    ) -> list[Tenant]:
        parents = set(parent_ids)
        return _ordered(r for r in self._rows.values() if r.parent_id in parents)

    async def list_roots(self) -> list[Tenant]:
        return _ordered(r for r in self._rows.values() if r.parent_id is None)

    def _find_child(self, parent_id: TenantId | None, name: str) -> Tenant | None:
        for row in self._rows.values():
            if row.parent_id == parent_id and row.name == name:
                return row
        return None

    def _ensure_name_free(self, tenant: Tenant) -> None:
        existing = self._find_child(tenant.parent_id, tenant.name)
        if existing is not None and existing.id != tenant.id:
            raise DuplicateSiblingNameError(
                tenant.name,
                tenant.parent_id.value if tenant.parent_id else None,
            )


class InMemoryTenantUnitOfWork:
    """Unit of work over an InMemoryTenantStore.

    Holds the store's lock from enter to exit, so units of work never
    interleave. It has no durable outbox; callers hand change messages
    to a publisher after commit instead.
    """

    def __init__(self, store: InMemoryTenantStore) -> None:
        self._store = store
        self._working: dict[TenantId, Tenant] = {}
        self._tenants: InMemoryTenantRepository | None = None
        self.outbox: IOutboxRepository | None = None

    @property
    def tenants(self) -> InMemoryTenantRepository:
        assert self._tenants is not None, "unit of work not entered"
        return self._tenants

    async def __aenter__(self) -> InMemoryTenantUnitOfWork:
        await self._store._lock.acquire()
        self._working = dict(self._store._rows)
        self._tenants = InMemoryTenantRepository(self._working)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._working = {}
        self._tenants = None
        self._store._lock.release()

    async def commit(self) -> None:
        self._store._rows = dict(self._working)

    async def rollback(self) -> None:
        self._working.clear()
        self._working.update(self._store._rows)


class InMemoryTenantStore:
    """Process-local tenant forest.

    Thread-safety: units of work are serialized per event loop only. Do
    not share a store between threads.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._rows: dict[TenantId, Tenant] = {}
        self._lock = asyncio.Lock()

    def unit_of_work(self) -> InMemoryTenantUnitOfWork:
        """Create a unit of work; usable as a TenantUnitOfWorkFactory."""
        return InMemoryTenantUnitOfWork(self)

    def load(self, tenants: Iterable[Tenant]) -> None:
        """Replace all rows without checking constraints.

        Intended for restoring snapshots and for reproducing corrupted
        data in tests.
        """
        self._rows = {tenant.id: _copy(tenant) for tenant in tenants}

    def snapshot(self) -> list[Tenant]:
        """Return copies of all rows ordered by (name, id)."""
        return _ordered(self._rows.values())

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, tenant_id: object) -> bool:
        return tenant_id in self._rows
