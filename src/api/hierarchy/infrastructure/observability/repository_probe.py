"""Domain probe for tenant repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to tenant persistence, including
constraint violations the store caught as a backstop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantRepositoryProbe(Protocol):
    """Domain probe for tenant repository operations."""

    def tenant_saved(self, tenant_id: str) -> None:
        """Record that a tenant row was inserted or updated."""
        ...

    def tenants_removed(self, count: int) -> None:
        """Record that tenant rows were removed."""
        ...

    def constraint_violated(self, constraint: str, tenant_id: str) -> None:
        """Record that the store rejected a write."""
        ...

    def store_unavailable(self, error: str) -> None:
        """Record that the store could not run or commit a transaction."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRepositoryProbe:
    """Default implementation of TenantRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultTenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRepositoryProbe(logger=self._logger, context=context)

    def tenant_saved(self, tenant_id: str) -> None:
        """Record that a tenant row was inserted or updated."""
        self._logger.debug(
            "tenant_saved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_removed(self, count: int) -> None:
        """Record that tenant rows were removed."""
        self._logger.debug(
            "tenants_removed",
            count=count,
            **self._get_context_kwargs(),
        )

    def constraint_violated(self, constraint: str, tenant_id: str) -> None:
        """Record that the store rejected a write."""
        self._logger.warning(
            "tenant_constraint_violated",
            constraint=constraint,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def store_unavailable(self, error: str) -> None:
        """Record that the store could not run or commit a transaction."""
        self._logger.error(
            "tenant_store_unavailable",
            error=error,
            **self._get_context_kwargs(),
        )
