"""Outbox worker delivering change messages to the message bus.

The worker runs as a background task, polling the outbox table for
undelivered entries and handing them to the injected transport.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.outbox.repository import OutboxRepository
from shared_kernel.outbox.value_objects import (
    ChangeMessage,
    OutboxEntry,
    format_subject,
)

if TYPE_CHECKING:
    from shared_kernel.outbox.observability import OutboxWorkerProbe
    from shared_kernel.outbox.ports import ChangeMessageTransport


class OutboxWorker:
    """Background worker that delivers outbox entries.

    Delivery is at-least-once: an entry is marked processed only after the
    transport accepted it, so a crash in between causes a redelivery on the
    next poll. Failed entries are retried up to ``max_retries`` times and
    then moved to the dead letter queue.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transport: ChangeMessageTransport,
        probe: OutboxWorkerProbe,
        subject_prefix: str,
        poll_interval_seconds: int = 5,
        batch_size: int = 100,
        max_retries: int = 5,
    ) -> None:
        """Initialize the worker.

        Args:
            session_factory: Factory for creating database sessions
            transport: Message bus client
            probe: Observability probe for logging/metrics
            subject_prefix: Prefix of the subjects messages are routed to
            poll_interval_seconds: How often to poll for undelivered entries
            batch_size: Maximum entries to deliver per batch
            max_retries: Maximum delivery attempts before moving to DLQ
        """
        self._session_factory = session_factory
        self._transport = transport
        self._probe = probe
        self._subject_prefix = subject_prefix
        self._poll_interval = poll_interval_seconds
        self._batch_size = batch_size
        self._max_retries = max_retries
        self._running = False
        self._tasks: list[asyncio.Task] = []

    async def start(self) -> None:
        """Start the poll loop."""
        self._running = True
        self._probe.worker_started()
        self._tasks.append(asyncio.create_task(self._poll_loop()))

    async def stop(self) -> None:
        """Gracefully stop the worker.

        Signals the loop to stop and waits for it to complete.
        """
        self._running = False

        for task in self._tasks:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._tasks.clear()
        self._probe.worker_stopped()

    async def _poll_loop(self) -> None:
        """Deliver undelivered entries every poll interval."""
        self._probe.poll_loop_started()

        while self._running:
            try:
                await self.process_batch()
            except Exception as e:
                # The next poll picks the batch up again
                self._probe.poll_loop_error(str(e))

            await asyncio.sleep(self._poll_interval)

    async def process_batch(self) -> int:
        """Fetch and deliver one batch of entries.

        Returns:
            Number of entries handled (delivered or failed)
        """
        async with self._session_factory() as session:
            async with session.begin():
                repository = OutboxRepository(session)
                entries = await repository.fetch_unprocessed(limit=self._batch_size)
                if entries:
                    await self._process_entries(entries, repository)

        if entries:
            self._probe.batch_processed(len(entries))
        return len(entries)

    async def _process_entries(
        self,
        entries: list[OutboxEntry],
        repository: OutboxRepository,
    ) -> None:
        """Deliver a list of entries, recording the outcome of each."""
        for entry in entries:
            subject = format_subject(
                self._subject_prefix, entry.aggregate_type, entry.event_type
            )
            try:
                message = ChangeMessage.from_payload(entry.payload)
                await self._transport.send(subject, message)
            except Exception as e:
                await self._handle_delivery_failure(entry, str(e), repository)
                continue

            await repository.mark_processed(entry.id)
            self._probe.event_delivered(entry.id, subject)

    async def _handle_delivery_failure(
        self,
        entry: OutboxEntry,
        error: str,
        repository: OutboxRepository,
    ) -> None:
        """Increment the retry count or move the entry to the DLQ.

        Args:
            entry: The outbox entry that failed
            error: The error message
            repository: Repository bound to the batch session
        """
        new_retry_count = entry.retry_count + 1
        dead_letter = new_retry_count >= self._max_retries

        await repository.record_failure(
            entry.id,
            retry_count=new_retry_count,
            error=error,
            dead_letter=dead_letter,
        )

        if dead_letter:
            self._probe.event_moved_to_dlq(entry.id, entry.event_type, error)
        else:
            self._probe.event_delivery_failed(entry.id, error, new_retry_count)
