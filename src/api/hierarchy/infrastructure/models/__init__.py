"""SQLAlchemy models for the hierarchy context."""

from hierarchy.infrastructure.models.tenant import (
    PARENT_FOREIGN_KEY,
    PRIMARY_KEY_CONSTRAINT,
    SIBLING_NAME_CONSTRAINT,
    TenantModel,
)

__all__ = [
    "PARENT_FOREIGN_KEY",
    "PRIMARY_KEY_CONSTRAINT",
    "SIBLING_NAME_CONSTRAINT",
    "TenantModel",
]
