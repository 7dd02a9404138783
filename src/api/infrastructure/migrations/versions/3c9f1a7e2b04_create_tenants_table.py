"""create_tenants_table

Create the tenants table holding the tenant forest. Sibling names are
unique per parent, with root tenants treated as siblings of each other
(NULLS NOT DISTINCT, PostgreSQL 15+).

Revision ID: 3c9f1a7e2b04
Revises:
Create Date: 2026-10-12 09:12:41.203117

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c9f1a7e2b04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("parent_tenant_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="tenants_pkey"),
        # No ON DELETE action: a parent is only removed together with its subtree
        sa.ForeignKeyConstraint(
            ["parent_tenant_id"],
            ["tenants.id"],
            name="fk_tenants_parent_tenant_id",
        ),
    )
    op.create_index(
        "uq_tenants_parent_name",
        "tenants",
        ["parent_tenant_id", "name"],
        unique=True,
        postgresql_nulls_not_distinct=True,
    )
    op.create_index(
        "ix_tenants_parent_tenant_id", "tenants", ["parent_tenant_id"], unique=False
    )
    op.create_index("tenant_created_at", "tenants", ["created_at"], unique=False)
    op.create_index("tenant_updated_at", "tenants", ["updated_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("tenant_updated_at", table_name="tenants")
    op.drop_index("tenant_created_at", table_name="tenants")
    op.drop_index("ix_tenants_parent_tenant_id", table_name="tenants")
    op.drop_index("uq_tenants_parent_name", table_name="tenants")
    op.drop_table("tenants")
