"""Error taxonomy for the tenant hierarchy context.

Every error raised by the hierarchy engine derives from TenantHierarchyError.
``retryable`` tells the caller whether repeating the same request can
succeed; only StoreUnavailableError is retryable, every other error needs a
different input.
"""


class TenantHierarchyError(Exception):
    """Base class for all tenant hierarchy errors."""

    retryable: bool = False


class TenantNotFoundError(TenantHierarchyError):
    """Raised when a referenced tenant id does not exist."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(f"Tenant {tenant_id} not found")
        self.tenant_id = tenant_id


class ParentTenantNotFoundError(TenantHierarchyError):
    """Raised when the parent supplied for a new tenant does not resolve.

    Also raised when the parent was deleted concurrently with the create.
    """

    def __init__(self, parent_id: str) -> None:
        super().__init__(f"Parent tenant {parent_id} not found")
        self.parent_id = parent_id


class DuplicateSiblingNameError(TenantHierarchyError):
    """Raised when a name is already used by a sibling under the same parent.

    Root tenants are siblings of each other.
    """

    def __init__(self, name: str, parent_id: str | None) -> None:
        scope = f"under tenant {parent_id}" if parent_id else "among root tenants"
        super().__init__(f"Tenant '{name}' already exists {scope}")
        self.name = name
        self.parent_id = parent_id


class HierarchyCycleError(TenantHierarchyError):
    """Raised when a tenant would become, or is found to be, its own ancestor."""

    def __init__(self, tenant_id: str, ancestor_id: str) -> None:
        super().__init__(
            f"Tenant {tenant_id} appears in the ancestor chain of {ancestor_id}"
        )
        self.tenant_id = tenant_id
        self.ancestor_id = ancestor_id


class TenantValidationError(TenantHierarchyError):
    """Raised when a request is malformed (e.g., an empty name)."""

    pass


class TenantConflictError(TenantHierarchyError):
    """Raised when the store rejects a row that collides with existing state.

    Covers id collisions on insert and rows still referenced by a child.
    """

    pass


class StoreUnavailableError(TenantHierarchyError):
    """Raised when the store could not run or commit the transaction.

    Nothing was applied; the caller may retry the same request.
    """

    retryable = True


class PartialFailureInvariantViolation(TenantHierarchyError):
    """Raised when a mutation would leave the tree partially applied.

    The transaction is rolled back before this propagates, so a partial
    state is never observable. Seeing this error indicates a defect.
    """

    pass
