"""Outbox repository implementation.

This module provides the PostgreSQL implementation of the outbox repository.
It handles persisting change messages to the outbox table and tracking their
delivery state.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.outbox.models import OutboxModel
from shared_kernel.outbox.value_objects import ChangeMessage, OutboxEntry


class OutboxRepository:
    """PostgreSQL implementation of the outbox repository.

    The repository only calls session.add() and session.execute() - it never
    calls session.commit(). The caller owns the transaction boundary.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a session.

        Args:
            session: The SQLAlchemy async session (shared with the caller)
        """
        self._session = session

    async def append(self, aggregate_type: str, message: ChangeMessage) -> None:
        """Append a change message to the outbox within the current transaction.

        Args:
            aggregate_type: Type of aggregate (e.g., "tenant")
            message: The change message to store
        """
        model = OutboxModel(
            aggregate_type=aggregate_type,
            aggregate_id=message.subject_id,
            event_type=message.event_type.value,
            payload=message.to_payload(),
            occurred_at=message.timestamp,
            processed_at=None,
        )

        self._session.add(model)

    async def fetch_unprocessed(self, limit: int = 100) -> list[OutboxEntry]:
        """Fetch undelivered entries ordered by creation time.

        Uses FOR UPDATE SKIP LOCKED for safe concurrent access when multiple
        workers are running. This ensures that each worker delivers different
        entries and no entry is handed to the bus twice concurrently.

        Args:
            limit: Maximum number of entries to fetch

        Returns:
            List of undelivered OutboxEntry value objects
        """
        stmt = (
            select(OutboxModel)
            .where(OutboxModel.processed_at.is_(None))
            .where(OutboxModel.failed_at.is_(None))
            .order_by(OutboxModel.created_at)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [model.to_value_object() for model in models]

    async def mark_processed(self, entry_id: UUID) -> None:
        """Mark an entry as delivered.

        Sets the processed_at timestamp to the current UTC time.

        Args:
            entry_id: The UUID of the entry to mark as delivered
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .values(processed_at=datetime.now(UTC))
        )

        await self._session.execute(stmt)

    async def record_failure(
        self,
        entry_id: UUID,
        retry_count: int,
        error: str,
        dead_letter: bool,
    ) -> None:
        """Record a failed delivery attempt.

        Dead-lettered entries get ``failed_at`` set and are no longer
        picked up by polling.

        Args:
            entry_id: The entry that failed
            retry_count: The new retry count
            error: The delivery error
            dead_letter: Move the entry to the DLQ instead of retrying
        """
        values: dict = {"retry_count": retry_count, "last_error": error}
        if dead_letter:
            values["failed_at"] = datetime.now(UTC)

        stmt = update(OutboxModel).where(OutboxModel.id == entry_id).values(**values)
        await self._session.execute(stmt)
