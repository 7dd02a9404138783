"""Tenant aggregate for the hierarchy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional, Sequence

from hierarchy.domain.events import TenantCreated, TenantDeleted, TenantUpdated
from hierarchy.domain.exceptions import TenantValidationError
from hierarchy.domain.value_objects import TenantId, TenantPatch

if TYPE_CHECKING:
    from hierarchy.domain.events import DomainEvent

MAX_TENANT_NAME_LENGTH = 255


@dataclass
class Tenant:
    """Tenant aggregate, a node in the tenant forest.

    A tenant either is a root (no parent) or references exactly one parent.
    The aggregate only knows its own parent id; the tree shape is resolved
    through the repository, never through object references.

    Business rules:
    - Names must be non-empty, not only whitespace, and at most 255 characters
    - The parent never changes after creation
    - Sibling name uniqueness is enforced by the hierarchy validator and
      backstopped by the store

    Event collection:
    - All mutating operations record domain events
    - Events can be collected via collect_events() once the change committed
    """

    id: TenantId
    name: str
    description: Optional[str]
    parent_id: Optional[TenantId]
    created_at: datetime
    updated_at: datetime
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        validate_tenant_name(self.name)

    @property
    def is_root(self) -> bool:
        """True if the tenant has no parent."""
        return self.parent_id is None

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        name: str,
        description: Optional[str] = None,
        parent_id: Optional[TenantId] = None,
        ancestor_ids: Sequence[TenantId] = (),
        actor_id: Optional[str] = None,
    ) -> Tenant:
        """Factory method for creating a new tenant.

        Args:
            tenant_id: Freshly generated id for the tenant
            name: The name of the tenant
            description: Optional free-form description
            parent_id: The parent tenant, or None for a root tenant
            ancestor_ids: The parent's ancestor chain, root first, ending
                with the parent itself
            actor_id: The actor performing the change

        Returns:
            A new Tenant aggregate with a TenantCreated event recorded

        Raises:
            TenantValidationError: If the name is invalid or the ancestor
                chain does not end with the parent
        """
        if parent_id is None and ancestor_ids:
            raise TenantValidationError("A root tenant cannot have ancestors")
        if parent_id is not None and (not ancestor_ids or ancestor_ids[-1] != parent_id):
            raise TenantValidationError("Ancestor chain must end with the parent")

        now = datetime.now(UTC)
        tenant = cls(
            id=tenant_id,
            name=name,
            description=description,
            parent_id=parent_id,
            created_at=now,
            updated_at=now,
        )
        tenant._pending_events.append(
            TenantCreated(
                tenant_id=tenant_id.value,
                name=name,
                parent_tenant_id=parent_id.value if parent_id else None,
                ancestor_ids=tuple(a.value for a in ancestor_ids),
                actor_id=actor_id,
                occurred_at=now,
            )
        )
        return tenant

    def apply_patch(self, patch: TenantPatch, actor_id: Optional[str] = None) -> None:
        """Change the tenant's name and/or description.

        Args:
            patch: The fields to change
            actor_id: The actor performing the change

        Raises:
            TenantValidationError: If the patch is empty or the new name invalid
        """
        if patch.is_empty:
            raise TenantValidationError("Update must set name or description")

        if patch.name is not None:
            validate_tenant_name(patch.name)
            self.name = patch.name
        if patch.description is not None:
            self.description = patch.description

        now = datetime.now(UTC)
        self.updated_at = now
        self._pending_events.append(
            TenantUpdated(
                tenant_id=self.id.value,
                name=self.name,
                description=self.description,
                changed_fields=patch.changed_fields(),
                actor_id=actor_id,
                occurred_at=now,
            )
        )

    def mark_for_deletion(self, actor_id: Optional[str] = None) -> None:
        """Mark the tenant for deletion and record the TenantDeleted event.

        Must be called for every tenant in a delete closure before the
        repository removes them.
        """
        self._pending_events.append(
            TenantDeleted(
                tenant_id=self.id.value,
                name=self.name,
                parent_tenant_id=self.parent_id.value if self.parent_id else None,
                actor_id=actor_id,
                occurred_at=datetime.now(UTC),
            )
        )

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events.

        Returns:
            List of domain events that occurred since the last collection
        """
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events


def validate_tenant_name(name: str, max_length: int = MAX_TENANT_NAME_LENGTH) -> None:
    """Check a tenant name.

    Names are stored verbatim; surrounding whitespace is not stripped.

    Raises:
        TenantValidationError: If the name is empty, only whitespace, or
            longer than max_length
    """
    if not isinstance(name, str) or not name.strip():
        raise TenantValidationError("Tenant name must not be empty")
    if len(name) > max_length:
        raise TenantValidationError(
            f"Tenant name must be at most {max_length} characters"
        )
