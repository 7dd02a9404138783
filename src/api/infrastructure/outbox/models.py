"""SQLAlchemy ORM model for the outbox table.

A row is one committed change message waiting for the outbox worker.
Delivered rows keep ``processed_at``; rows that exhausted their retries
keep ``failed_at`` and form the dead letter queue.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base
from shared_kernel.outbox.value_objects import OutboxEntry

PENDING_INDEX = "idx_outbox_unprocessed"
DEAD_LETTER_INDEX = "idx_outbox_failed"


class OutboxModel(Base):
    """ORM model for the outbox table.

    Both indexes are partial: the worker's poll only touches pending rows,
    and DLQ monitoring only touches failed ones.
    """

    __tablename__ = "outbox"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    aggregate_type: Mapped[str] = mapped_column(String(255))
    aggregate_id: Mapped[str] = mapped_column(String(64))
    event_type: Mapped[str] = mapped_column(String(255))
    payload: Mapped[dict[str, Any]] = mapped_column(JSON)
    occurred_at: Mapped[datetime]
    processed_at: Mapped[Optional[datetime]]
    created_at: Mapped[datetime] = mapped_column(server_default=text("NOW()"))
    retry_count: Mapped[int] = mapped_column(server_default="0")
    last_error: Mapped[Optional[str]] = mapped_column(Text)
    failed_at: Mapped[Optional[datetime]]

    __table_args__ = (
        Index(
            PENDING_INDEX,
            "created_at",
            postgresql_where=text("processed_at IS NULL AND failed_at IS NULL"),
        ),
        Index(
            DEAD_LETTER_INDEX,
            "failed_at",
            postgresql_where=text("failed_at IS NOT NULL"),
        ),
    )

    def to_value_object(self) -> OutboxEntry:
        """Convert this row to an OutboxEntry value object."""
        return OutboxEntry(
            id=self.id,
            aggregate_type=self.aggregate_type,
            aggregate_id=self.aggregate_id,
            event_type=self.event_type,
            payload=self.payload,
            occurred_at=self.occurred_at,
            processed_at=self.processed_at,
            created_at=self.created_at,
            retry_count=self.retry_count,
            last_error=self.last_error,
            failed_at=self.failed_at,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<OutboxModel(id={self.id}, aggregate_id={self.aggregate_id}, "
            f"event_type={self.event_type}, retry_count={self.retry_count})>"
        )
