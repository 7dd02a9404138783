"""SQLAlchemy ORM model for the tenants table.

Each row is one node of the tenant forest. The parent link is a plain
self-referencing foreign key; the tree is walked by id lookups in the
repository rather than through ORM relationships.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

SIBLING_NAME_CONSTRAINT = "uq_tenants_parent_name"
PARENT_FOREIGN_KEY = "fk_tenants_parent_tenant_id"
PRIMARY_KEY_CONSTRAINT = "tenants_pkey"


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    Sibling names are unique per parent, and root tenants count as
    siblings of each other: the unique index treats NULL parents as equal.
    The parent foreign key has no ON DELETE action, so a parent can only
    be removed in the same statement as all of its children.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parent_tenant_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("tenants.id", name=PARENT_FOREIGN_KEY),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        Index(
            SIBLING_NAME_CONSTRAINT,
            "parent_tenant_id",
            "name",
            unique=True,
            postgresql_nulls_not_distinct=True,
        ),
        Index("tenant_created_at", "created_at"),
        Index("tenant_updated_at", "updated_at"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TenantModel(id={self.id}, name={self.name}, "
            f"parent_tenant_id={self.parent_tenant_id})>"
        )
