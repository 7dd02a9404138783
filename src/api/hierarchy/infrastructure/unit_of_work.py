"""SQLAlchemy implementation of the tenant unit of work.

Opens one AsyncSession per unit of work and shares it between the tenant
repository and the outbox. Driver and connection failures leave the unit
of work as StoreUnavailableError; constraint violations are translated
by the repository before they get here.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hierarchy.domain.exceptions import StoreUnavailableError, TenantConflictError
from hierarchy.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from hierarchy.infrastructure.tenant_repository import TenantRepository
from infrastructure.outbox.repository import OutboxRepository

_STORE_ERRORS = (DBAPIError, OSError)


def _is_store_failure(error: BaseException | None) -> bool:
    return isinstance(error, _STORE_ERRORS) and not isinstance(error, IntegrityError)


class SQLAlchemyTenantUnitOfWork:
    """Unit of work backed by a PostgreSQL transaction."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize the unit of work.

        Args:
            session_factory: Factory for creating database sessions
            probe: Optional probe shared with the repository
        """
        self._session_factory = session_factory
        self._probe = probe or DefaultTenantRepositoryProbe()
        self._session: AsyncSession | None = None
        self._tenants: TenantRepository | None = None
        self._outbox: OutboxRepository | None = None
        self._committed = False

    @property
    def tenants(self) -> TenantRepository:
        """Repository bound to this unit of work's session."""
        assert self._tenants is not None, "unit of work not entered"
        return self._tenants

    @property
    def outbox(self) -> OutboxRepository:
        """Outbox bound to this unit of work's session and transaction."""
        assert self._outbox is not None, "unit of work not entered"
        return self._outbox

    async def __aenter__(self) -> SQLAlchemyTenantUnitOfWork:
        """Open a session; the transaction begins on first use."""
        self._session = self._session_factory()
        self._committed = False
        self._tenants = TenantRepository(self._session, probe=self._probe)
        self._outbox = OutboxRepository(self._session)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Roll back anything not committed and close the session.

        Raises:
            StoreUnavailableError: If the block failed on a driver or
                connection error
        """
        assert self._session is not None
        try:
            if not self._committed:
                await self._session.rollback()
        except _STORE_ERRORS as e:
            # The connection is gone; the server discards the transaction
            self._probe.store_unavailable(str(e))
        finally:
            await self._session.close()
            self._session = None
            self._tenants = None
            self._outbox = None

        if _is_store_failure(exc_val):
            self._probe.store_unavailable(str(exc_val))
            raise StoreUnavailableError(str(exc_val)) from exc_val

    async def commit(self) -> None:
        """Commit the transaction.

        Raises:
            TenantConflictError: If a deferred constraint rejected the commit
            StoreUnavailableError: If the store could not commit
        """
        assert self._session is not None
        try:
            await self._session.commit()
        except IntegrityError as e:
            raise TenantConflictError(str(e)) from e
        except _STORE_ERRORS as e:
            self._probe.store_unavailable(str(e))
            raise StoreUnavailableError(str(e)) from e
        self._committed = True

    async def rollback(self) -> None:
        """Discard all changes made in this unit of work."""
        assert self._session is not None
        await self._session.rollback()
