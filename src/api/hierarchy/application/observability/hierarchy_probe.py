"""Protocol for hierarchy validation and traversal observability.

Covers the structural checks run before a mutation and the ancestor and
descendant walks run by the cascade resolver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class HierarchyProbe(Protocol):
    """Domain probe for hierarchy validation and traversal."""

    def parent_not_found(self, parent_id: str) -> None:
        """Record that a create referenced a missing parent."""
        ...

    def duplicate_sibling_name(self, name: str, parent_id: str | None) -> None:
        """Record that a name collided with a sibling's."""
        ...

    def cycle_detected(self, tenant_id: str, ancestor_id: str) -> None:
        """Record that a tenant was found in its own ancestor chain."""
        ...

    def dangling_parent(self, tenant_id: str, parent_id: str) -> None:
        """Record that a tenant references a parent that does not exist."""
        ...

    def duplicate_row_skipped(self, root_id: str, tenant_id: str) -> None:
        """Record that a descendant walk saw the same tenant twice."""
        ...

    def until_not_reached(self, tenant_id: str, until_id: str) -> None:
        """Record that an ancestor walk reached a root before its boundary."""
        ...

    def closure_resolved(self, tenant_id: str, size: int) -> None:
        """Record the size of a delete closure."""
        ...

    def with_context(self, context: ObservationContext) -> HierarchyProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultHierarchyProbe:
    """Default implementation of HierarchyProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultHierarchyProbe:
        """Create a new probe with observation context bound."""
        return DefaultHierarchyProbe(logger=self._logger, context=context)

    def parent_not_found(self, parent_id: str) -> None:
        """Record that a create referenced a missing parent."""
        self._logger.debug(
            "parent_tenant_not_found",
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def duplicate_sibling_name(self, name: str, parent_id: str | None) -> None:
        """Record that a name collided with a sibling's."""
        self._logger.warning(
            "duplicate_sibling_name",
            name=name,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def cycle_detected(self, tenant_id: str, ancestor_id: str) -> None:
        """Record that a tenant was found in its own ancestor chain."""
        self._logger.error(
            "tenant_hierarchy_cycle_detected",
            tenant_id=tenant_id,
            ancestor_id=ancestor_id,
            **self._get_context_kwargs(),
        )

    def dangling_parent(self, tenant_id: str, parent_id: str) -> None:
        """Record that a tenant references a parent that does not exist."""
        self._logger.error(
            "tenant_dangling_parent",
            tenant_id=tenant_id,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def duplicate_row_skipped(self, root_id: str, tenant_id: str) -> None:
        """Record that a descendant walk saw the same tenant twice."""
        self._logger.warning(
            "tenant_duplicate_row_skipped",
            root_id=root_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def until_not_reached(self, tenant_id: str, until_id: str) -> None:
        """Record that an ancestor walk reached a root before its boundary."""
        self._logger.debug(
            "ancestor_boundary_not_reached",
            tenant_id=tenant_id,
            until_id=until_id,
            **self._get_context_kwargs(),
        )

    def closure_resolved(self, tenant_id: str, size: int) -> None:
        """Record the size of a delete closure."""
        self._logger.debug(
            "delete_closure_resolved",
            tenant_id=tenant_id,
            size=size,
            **self._get_context_kwargs(),
        )
