"""Protocol for tenant application service observability.

Defines the interface for domain probes that capture application-level
domain events for tenant service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant application service operations."""

    def tenant_created(self, tenant_id: str, name: str, parent_id: str | None) -> None:
        """Record that a tenant was created."""
        ...

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        ...

    def tenant_updated(self, tenant_id: str, changed_fields: tuple[str, ...]) -> None:
        """Record that a tenant was updated."""
        ...

    def tenants_deleted(self, tenant_id: str, count: int) -> None:
        """Record that a tenant and its subtree were deleted."""
        ...

    def tenants_listed(self, scope: str, count: int) -> None:
        """Record that tenants were listed."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        ...

    def mutation_rejected(self, operation: str, reason: str) -> None:
        """Record that a mutation failed validation and nothing was applied."""
        ...

    def mutation_rolled_back(self, operation: str, error: str) -> None:
        """Record that a mutation was rolled back by a store failure."""
        ...

    def notifications_recorded(self, count: int) -> None:
        """Record that change messages were added to the outbox before commit."""
        ...

    def notification_published(self, subject_id: str, event_type: str) -> None:
        """Record that a change message was handed to the publisher."""
        ...

    def notification_publish_failed(
        self, subject_id: str, event_type: str, error: str
    ) -> None:
        """Record that a committed change could not be published."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, name: str, parent_id: str | None) -> None:
        """Record that a tenant was created."""
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            name=name,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        self._logger.debug(
            "tenant_retrieved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_updated(self, tenant_id: str, changed_fields: tuple[str, ...]) -> None:
        """Record that a tenant was updated."""
        self._logger.info(
            "tenant_updated",
            tenant_id=tenant_id,
            changed_fields=list(changed_fields),
            **self._get_context_kwargs(),
        )

    def tenants_deleted(self, tenant_id: str, count: int) -> None:
        """Record that a tenant and its subtree were deleted."""
        self._logger.info(
            "tenants_deleted",
            tenant_id=tenant_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, scope: str, count: int) -> None:
        """Record that tenants were listed."""
        self._logger.debug(
            "tenants_listed",
            scope=scope,
            count=count,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        self._logger.debug(
            "tenant_not_found",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def mutation_rejected(self, operation: str, reason: str) -> None:
        """Record that a mutation failed validation and nothing was applied."""
        self._logger.warning(
            "tenant_mutation_rejected",
            operation=operation,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def mutation_rolled_back(self, operation: str, error: str) -> None:
        """Record that a mutation was rolled back by a store failure."""
        self._logger.error(
            "tenant_mutation_rolled_back",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

    def notifications_recorded(self, count: int) -> None:
        """Record that change messages were added to the outbox before commit."""
        self._logger.debug(
            "tenant_notifications_recorded",
            count=count,
            **self._get_context_kwargs(),
        )

    def notification_published(self, subject_id: str, event_type: str) -> None:
        """Record that a change message was handed to the publisher."""
        self._logger.debug(
            "tenant_notification_published",
            subject_id=subject_id,
            event_type=event_type,
            **self._get_context_kwargs(),
        )

    def notification_publish_failed(
        self, subject_id: str, event_type: str, error: str
    ) -> None:
        """Record that a committed change could not be published."""
        self._logger.error(
            "tenant_notification_publish_failed",
            subject_id=subject_id,
            event_type=event_type,
            error=error,
            **self._get_context_kwargs(),
        )
