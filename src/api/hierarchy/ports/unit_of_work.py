"""Unit of Work protocol for the tenant hierarchy context."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from hierarchy.ports.repositories import ITenantRepository
from shared_kernel.outbox.ports import IOutboxRepository


@runtime_checkable
class ITenantUnitOfWork(Protocol):
    """Transaction boundary around tenant repository operations.

    Everything done through ``tenants`` inside one ``async with`` block
    becomes visible atomically on ``commit()``. Leaving the block without
    committing, or with an exception, rolls back all of it.

    Usage:
        async with uow_factory() as uow:
            tenant = await uow.tenants.get_by_id(tenant_id)
            tenant.apply_patch(patch)
            await uow.tenants.update(tenant)
            await uow.commit()

    Change messages appended to ``outbox`` are part of the same
    transaction: they are stored if and only if the mutation commits. A
    store without a durable outbox exposes ``outbox = None``.

    Store failures surface as StoreUnavailableError.
    """

    tenants: ITenantRepository
    outbox: Optional[IOutboxRepository]

    async def __aenter__(self) -> ITenantUnitOfWork:
        """Begin the transaction."""
        ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """End the transaction, rolling back anything not committed."""
        ...

    async def commit(self) -> None:
        """Commit all changes made in this unit of work.

        Raises:
            StoreUnavailableError: If the store could not commit
        """
        ...

    async def rollback(self) -> None:
        """Discard all changes made in this unit of work."""
        ...


TenantUnitOfWorkFactory = Callable[[], ITenantUnitOfWork]
