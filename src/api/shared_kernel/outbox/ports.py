"""Protocols (ports) for change notification delivery.

These protocols define the seams between a bounded context that produces
change messages, the outbox that stores them durably, and the message bus
that finally delivers them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from shared_kernel.outbox.value_objects import ChangeMessage, OutboxEntry


@runtime_checkable
class ChangePublisher(Protocol):
    """Accepts committed change messages for delivery.

    Delivery guarantees (retry, redelivery) are the publisher's
    responsibility; callers hand a message over once and do not retry.
    """

    async def publish(self, aggregate_type: str, message: "ChangeMessage") -> None:
        """Hand a change message over for delivery.

        Args:
            aggregate_type: Type of aggregate that changed (e.g., "tenant")
            message: The change message to deliver

        Raises:
            Exception: If the message could not be accepted
        """
        ...


@runtime_checkable
class ChangeMessageTransport(Protocol):
    """Message bus client used by the outbox worker."""

    async def send(self, subject: str, message: "ChangeMessage") -> None:
        """Send a change message to a subject.

        Args:
            subject: Fully qualified subject
                (e.g., "com.infratographer.events.tenants.create.global")
            message: The change message to send

        Raises:
            Exception: If the bus did not accept the message
        """
        ...


@runtime_checkable
class IOutboxRepository(Protocol):
    """Repository for outbox entry persistence.

    The repository shares the session of its caller; it never commits.
    """

    async def append(self, aggregate_type: str, message: "ChangeMessage") -> None:
        """Append a change message to the outbox within the current transaction.

        Args:
            aggregate_type: Type of aggregate (e.g., "tenant")
            message: The change message to store
        """
        ...

    async def fetch_unprocessed(self, limit: int = 100) -> list["OutboxEntry"]:
        """Fetch undelivered, non-dead-lettered entries ordered by creation time.

        Uses FOR UPDATE SKIP LOCKED for safe concurrent access when multiple
        workers are running.

        Args:
            limit: Maximum number of entries to fetch

        Returns:
            List of OutboxEntry objects
        """
        ...

    async def mark_processed(self, entry_id: UUID) -> None:
        """Mark an entry as delivered."""
        ...

    async def record_failure(
        self,
        entry_id: UUID,
        retry_count: int,
        error: str,
        dead_letter: bool,
    ) -> None:
        """Record a failed delivery attempt.

        Args:
            entry_id: The entry that failed
            retry_count: The new retry count
            error: The delivery error
            dead_letter: Move the entry to the DLQ instead of retrying
        """
        ...
