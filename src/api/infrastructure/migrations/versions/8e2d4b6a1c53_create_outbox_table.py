"""create_outbox_table

Create the outbox table for change message delivery. Messages are stored
after the tenant mutation commits and delivered to the message bus by the
outbox worker, with retries and a dead letter state.

Revision ID: 8e2d4b6a1c53
Revises: 3c9f1a7e2b04
Create Date: 2026-10-12 09:40:05.551862

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8e2d4b6a1c53"
down_revision: Union[str, Sequence[str], None] = "3c9f1a7e2b04"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "outbox",
        sa.Column(
            "id",
            sa.UUID(),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "aggregate_type", sa.String(length=255), nullable=False
        ),  # e.g., "tenant"
        sa.Column(
            "aggregate_id", sa.String(length=64), nullable=False
        ),  # subject id of the message
        sa.Column(
            "event_type", sa.String(length=255), nullable=False
        ),  # create, update or delete
        sa.Column("payload", sa.JSON(), nullable=False),  # Change message
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("retry_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_outbox_unprocessed",
        "outbox",
        ["created_at"],
        unique=False,
        postgresql_where=sa.text("processed_at IS NULL AND failed_at IS NULL"),
    )
    op.create_index(
        "idx_outbox_failed",
        "outbox",
        ["failed_at"],
        unique=False,
        postgresql_where=sa.text("failed_at IS NOT NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_outbox_failed", table_name="outbox")
    op.drop_index("idx_outbox_unprocessed", table_name="outbox")
    op.drop_table("outbox")
